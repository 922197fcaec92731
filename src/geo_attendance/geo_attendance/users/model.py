from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no database access here.
    """

    user_id: int
    username: str
    password_hash: str
    name: str
    email: str
    role: Role
    is_active: bool = True
    reset_otp: Optional[str] = None
    reset_otp_expires: Optional[datetime] = None
