from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthenticationError
from src.geo_attendance.geo_attendance.users.tokens import TokenService

SECRET = "unit-test-secret-key-of-32-bytes-min"


def test_issue_and_decode_round_trip():
    tokens = TokenService(SECRET, ttl_hours=1)

    claims = tokens.decode(tokens.issue(user_id=7, username="john", role=Role.USER))

    assert claims.user_id == 7
    assert claims.username == "john"
    assert claims.role == Role.USER


def test_expired_token_is_rejected():
    tokens = TokenService(SECRET, ttl_hours=1)
    token = tokens.issue(
        user_id=7, username="john", role=Role.USER, now=datetime.now(timezone.utc) - timedelta(hours=2)
    )

    with pytest.raises(AuthenticationError, match="expired"):
        tokens.decode(token)


def test_token_signed_with_another_secret_is_rejected():
    token = TokenService("another-secret-key-of-at-least-32-bytes").issue(user_id=1, username="admin", role=Role.ADMIN)

    with pytest.raises(AuthenticationError, match="Invalid token"):
        TokenService(SECRET).decode(token)
    with pytest.raises(AuthenticationError, match="Invalid token"):
        TokenService(SECRET).decode("not-a-jwt")


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenService("")
