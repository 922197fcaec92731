from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, request

from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.service import AuthService, SessionUser


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user() -> SessionUser:
    user = g.get("current_user")
    if user is None:
        raise AuthenticationError("Access token required")
    return user


def make_guards(auth_service: AuthService) -> tuple[Callable, Callable]:
    """Build the `auth_required` / `admin_required` view decorators."""

    def auth_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = auth_service.resolve_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = auth_service.resolve_token(bearer_token())
            if not g.current_user.is_admin:
                raise AuthorizationError("Access denied")
            return view(*args, **kwargs)

        return wrapper

    return auth_required, admin_required
