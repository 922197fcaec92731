from __future__ import annotations

from dataclasses import replace

import pytest

from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.geo_attendance.geo_attendance.users.service import AuthService, UserService


@pytest.fixture
def auth(users_repo, tokens):
    return AuthService(users_repo, tokens)


@pytest.fixture
def user_service(users_repo):
    return UserService(users_repo)


def test_login_returns_token_for_that_user(auth):
    result = auth.authenticate("john", "john123")

    assert result.user.username == "john"
    assert result.user.role == Role.USER
    assert auth.resolve_token(result.token).user_id == 2


@pytest.mark.parametrize("username,password", [("john", "wrong"), ("nobody", "john123"), ("", "")])
def test_bad_credentials(auth, username, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.authenticate(username, password)


def test_inactive_user_cannot_log_in_or_use_old_token(auth, users_repo):
    token = auth.authenticate("jane", "jane123").token
    users_repo.users_by_id[3] = replace(users_repo.users_by_id[3], is_active=False)

    with pytest.raises(AuthenticationError):
        auth.authenticate("jane", "jane123")
    with pytest.raises(AuthenticationError, match="Invalid token"):
        auth.resolve_token(token)


def test_placeholder_hash_does_not_crash_login(auth, users_repo):
    users_repo.users_by_id[2] = replace(users_repo.users_by_id[2], password_hash="CHANGE_ME")

    with pytest.raises(AuthenticationError):
        auth.authenticate("john", "john123")


def test_missing_token(auth):
    with pytest.raises(AuthenticationError, match="Access token required"):
        auth.resolve_token(None)


def test_admin_registers_user(user_service, auth):
    created = user_service.register(
        current_role=Role.ADMIN,
        username="mary",
        password="mary123",
        name="Mary Major",
        email="Mary@Company.com",
    )

    assert created.email == "mary@company.com"
    assert created.role == Role.USER
    assert auth.authenticate("mary", "mary123").user.user_id == created.user_id


def test_register_rules(user_service):
    with pytest.raises(AuthorizationError):
        user_service.register(current_role=Role.USER, username="x", password="secret1", name="X", email="x@y.io")
    with pytest.raises(ValidationError, match="already exists"):
        user_service.register(
            current_role=Role.ADMIN, username="john", password="secret1", name="J", email="new@company.com"
        )
    with pytest.raises(ValidationError, match="already exists"):
        user_service.register(
            current_role=Role.ADMIN, username="johnny", password="secret1", name="J", email="john@company.com"
        )
    with pytest.raises(ValidationError, match="at least 6"):
        user_service.register(current_role=Role.ADMIN, username="x", password="123", name="X", email="x@y.io")
    with pytest.raises(ValidationError):
        user_service.register(current_role=Role.ADMIN, username="x", password="secret1", name="X", email="nope")


def test_profile_of_unknown_user(user_service):
    with pytest.raises(NotFoundError):
        user_service.get_profile(404)
