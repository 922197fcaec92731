from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_GEOCODER_TIMEOUT, DEFAULT_GEOCODER_URL, DEFAULT_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .location.resolver import LocationResolver, NominatimGeocoder
from .notifications.mailer import LoggingOtpMailer, OtpMailer, SmtpOtpMailer, SmtpSettings
from .parties.mysql_party_repository import MySQLPartyRepository
from .parties.repository import PartyRepository
from .parties.service import PartyService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, PasswordResetService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    parties_repo: PartyRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    password_reset_service: PasswordResetService
    party_service: PartyService
    attendance_service: AttendanceService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    users_repo: UserRepository,
    parties_repo: PartyRepository,
    attendance_repo: AttendanceRepository,
    tokens: TokenService,
    mailer: OtpMailer,
    locations: LocationResolver,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    party_service = PartyService(parties_repo)
    return Container(
        users_repo=users_repo,
        parties_repo=parties_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        password_reset_service=PasswordResetService(users_repo, mailer),
        party_service=party_service,
        attendance_service=AttendanceService(attendance_repo, users_repo, party_service, locations),
        conn=conn,
    )


def build_mailer(smtp_config: Optional[dict]) -> OtpMailer:
    if not smtp_config or not smtp_config.get("host"):
        return LoggingOtpMailer()
    return SmtpOtpMailer(
        SmtpSettings(
            host=str(smtp_config["host"]),
            port=int(smtp_config.get("port", 587)),
            username=str(smtp_config.get("user", "")),
            password=str(smtp_config.get("password", "")),
            sender=str(smtp_config.get("sender", "")),
            use_tls=bool(smtp_config.get("use_tls", True)),
            timeout=float(smtp_config.get("timeout", 10)),
        )
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    smtp_config: Optional[dict] = None,
    geocoder_url: Optional[str] = DEFAULT_GEOCODER_URL,
    geocoder_timeout: float = DEFAULT_GEOCODER_TIMEOUT,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    geocoder = NominatimGeocoder(url=geocoder_url, timeout=geocoder_timeout) if geocoder_url else None

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        parties_repo=MySQLPartyRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tokens=TokenService(jwt_secret, ttl_hours=token_ttl_hours),
        mailer=build_mailer(smtp_config),
        locations=LocationResolver(geocoder),
        conn=conn,
    )
