from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, OTP_LENGTH, OTP_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..notifications.mailer import OtpMailer
from .model import User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """The authenticated caller of a request, resolved from the bearer token."""

    user_id: int
    username: str
    name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            username=user.username,
            name=user.name,
            email=user.email,
            role=user.role,
        )


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: SessionUser


class AuthService:
    """Use case: authenticate user (login) and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def authenticate(self, username: str, password: str) -> LoginResult:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        token = self._tokens.issue(user_id=user.user_id, username=user.username, role=user.role)
        logger.info("User %s logged in", user.username)
        return LoginResult(token=token, user=SessionUser.from_user(user))

    def resolve_token(self, token: Optional[str]) -> SessionUser:
        if not token:
            raise AuthenticationError("Access token required")

        claims = self._tokens.decode(token)
        user = self._users.get_by_id(claims.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid token")
        return SessionUser.from_user(user)


class UserService:
    """Use case: manage users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, user_id: int) -> SessionUser:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return SessionUser.from_user(user)

    def register(
        self,
        *,
        current_role: Role,
        username: str,
        password: str,
        name: str,
        email: str,
        role: Role = Role.USER,
    ) -> SessionUser:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")

        username = require_non_empty(username, "Username")
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username) or self._users.get_by_email(email):
            raise ValidationError("User already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            name=name,
            email=email,
            role=role,
        )
        logger.info("User %s (%s) registered as %s", user_id, username, role.value)
        return self.get_profile(user_id)


def generate_otp() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(OTP_LENGTH))


class PasswordResetService:
    """Use case: forgotten password via a mailed one-time password.

    Every check fails closed: a missing, mismatched or expired OTP is rejected.
    """

    def __init__(self, users: UserRepository, mailer: OtpMailer, *, ttl_minutes: int = OTP_TTL_MINUTES):
        self._users = users
        self._mailer = mailer
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def request_otp(self, email: str, *, now: Optional[datetime] = None) -> None:
        now = now or now_local()
        email = require_non_empty(email, "Email").lower()

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise NotFoundError("User not found")

        otp = generate_otp()
        self._users.set_reset_otp(user.user_id, otp=otp, expires=now + self._ttl)
        self._mailer.send_otp(user.email, otp)

    def _check_otp(self, user: Optional[User], otp: str, now: datetime) -> User:
        if (
            not user
            or not user.reset_otp
            or not user.reset_otp_expires
            or not hmac.compare_digest(user.reset_otp.encode("utf-8"), str(otp or "").encode("utf-8"))
        ):
            raise ValidationError("Invalid or expired OTP")
        if user.reset_otp_expires < now:
            raise ValidationError("Invalid or expired OTP")
        return user

    def verify_otp(self, email: str, otp: str, *, now: Optional[datetime] = None) -> bool:
        now = now or now_local()
        email = require_non_empty(email, "Email").lower()

        user = self._users.get_by_email(email)
        if user and not user.is_active:
            user = None
        # Checked only; the OTP is consumed by reset_password.
        self._check_otp(user, otp, now)
        return True

    def reset_password(self, email: str, otp: str, new_password: str, *, now: Optional[datetime] = None) -> None:
        now = now or now_local()
        if not email or not otp or not new_password:
            raise ValidationError("Missing required fields")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise ValidationError("User not found")

        user = self._check_otp(user, otp, now)
        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("Password reset for user %s", user.username)
