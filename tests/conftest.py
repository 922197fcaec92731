from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.geo_attendance.geo_attendance.attendance.model import AttendanceRecord
from src.geo_attendance.geo_attendance.attendance.sessions import with_entry
from src.geo_attendance.geo_attendance.container import wire_services
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import DeliveryError
from src.geo_attendance.geo_attendance.location.resolver import LocationResolver
from src.geo_attendance.geo_attendance.main import create_app
from src.geo_attendance.geo_attendance.parties.model import Party
from src.geo_attendance.geo_attendance.users.model import User
from src.geo_attendance.geo_attendance.users.service import SessionUser
from src.geo_attendance.geo_attendance.users.tokens import TokenService


class InMemoryUsers:
    def __init__(self, users: list[User] = ()):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self.users_by_id, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.username == username), None)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def create_user(self, *, username, password_hash, name, email, role) -> int:
        uid = self._next_id
        self._next_id += 1
        self.users_by_id[uid] = User(
            user_id=uid,
            username=username,
            password_hash=password_hash,
            name=name,
            email=email,
            role=role,
        )
        return uid

    def set_reset_otp(self, user_id, *, otp, expires) -> bool:
        user = self.users_by_id[int(user_id)]
        self.users_by_id[user.user_id] = replace(user, reset_otp=otp, reset_otp_expires=expires)
        return True

    def update_password(self, user_id, *, password_hash) -> bool:
        user = self.users_by_id[int(user_id)]
        self.users_by_id[user.user_id] = replace(
            user, password_hash=password_hash, reset_otp=None, reset_otp_expires=None
        )
        return True


class InMemoryParties:
    def __init__(self, parties: list[Party] = ()):
        self.parties_by_id: dict[int, Party] = {p.party_id: p for p in parties}
        self._next_id = max(self.parties_by_id, default=0) + 1

    def get_by_id(self, party_id: int) -> Optional[Party]:
        return self.parties_by_id.get(int(party_id))

    def find_active_by_name(self, name: str, *, exclude_id: Optional[int] = None) -> Optional[Party]:
        for p in self.parties_by_id.values():
            if p.is_active and p.name.lower() == name.lower() and p.party_id != exclude_id:
                return p
        return None

    def list_active(self):
        return sorted((p for p in self.parties_by_id.values() if p.is_active), key=lambda p: p.name)

    def list_all(self):
        return sorted(self.parties_by_id.values(), key=lambda p: p.name)

    def create(self, *, name, description, created_by) -> int:
        pid = self._next_id
        self._next_id += 1
        self.parties_by_id[pid] = Party(
            party_id=pid,
            name=name,
            description=description,
            is_active=True,
            created_by=created_by,
            created_by_name="Admin User",
            created_at=datetime(2026, 3, 1, 9, 0, 0),
        )
        return pid

    def update(self, *, party_id, name, description, is_active) -> bool:
        party = self.parties_by_id[int(party_id)]
        self.parties_by_id[party.party_id] = replace(party, name=name, description=description, is_active=is_active)
        return True

    def set_active(self, party_id, *, is_active) -> bool:
        party = self.parties_by_id[int(party_id)]
        self.parties_by_id[party.party_id] = replace(party, is_active=is_active)
        return True


class InMemoryAttendance:
    """Thread-safe stand-in for the MySQL store; one lock guards every append."""

    def __init__(self, records: list[AttendanceRecord] = ()):
        self._lock = threading.Lock()
        self.records: dict[tuple[int, str], AttendanceRecord] = {(r.user_id, r.date): r for r in records}
        self._next_id = len(self.records) + 1

    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        return self.records.get((int(user_id), work_date))

    def list_for_user(self, user_id: int):
        rows = [r for r in self.records.values() if r.user_id == int(user_id)]
        return sorted(rows, key=lambda r: r.date, reverse=True)

    def list_all(self):
        return sorted(self.records.values(), key=lambda r: (r.date, -r.user_id), reverse=True)

    def append_entry(self, *, user_id, user_name, work_date, entry) -> AttendanceRecord:
        with self._lock:
            record = self.records.get((user_id, work_date))
            if record is None:
                record = AttendanceRecord(
                    record_id=self._next_id,
                    user_id=user_id,
                    user_name=user_name,
                    date=work_date,
                    created_at=entry.timestamp,
                )
                self._next_id += 1
            record = replace(with_entry(record, entry), updated_at=entry.timestamp)
            self.records[(user_id, work_date)] = record
            return record


class RecordingMailer:
    def __init__(self, *, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def send_otp(self, email: str, otp: str) -> None:
        if self.fail:
            raise DeliveryError("Could not send OTP email, please try again later")
        self.sent.append((email, otp))


def make_user(user_id: int, username: str, role: Role = Role.USER, *, password: str = "secret123") -> User:
    return User(
        user_id=user_id,
        username=username,
        password_hash=generate_password_hash(password),
        name=username.title(),
        email=f"{username}@company.com",
        role=role,
    )


def make_party(party_id: int, name: str, *, is_active: bool = True) -> Party:
    return Party(
        party_id=party_id,
        name=name,
        description=f"{name} account",
        is_active=is_active,
        created_by=1,
        created_by_name="Admin",
    )


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user(1, "admin", Role.ADMIN, password="admin123"),
            make_user(2, "john", password="john123"),
            make_user(3, "jane", password="jane123"),
        ]
    )


@pytest.fixture
def parties_repo():
    return InMemoryParties(
        [
            make_party(1, "Acme"),
            make_party(2, "Globex"),
            make_party(3, "Old Co", is_active=False),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def tokens():
    return TokenService("test-jwt-secret-key-of-at-least-32-bytes", ttl_hours=1)


@pytest.fixture
def admin(users_repo):
    return SessionUser.from_user(users_repo.get_by_id(1))


@pytest.fixture
def john(users_repo):
    return SessionUser.from_user(users_repo.get_by_id(2))


@pytest.fixture
def jane(users_repo):
    return SessionUser.from_user(users_repo.get_by_id(3))


@pytest.fixture
def container(users_repo, parties_repo, attendance_repo, tokens, mailer):
    return wire_services(
        users_repo=users_repo,
        parties_repo=parties_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        mailer=mailer,
        locations=LocationResolver(),
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
