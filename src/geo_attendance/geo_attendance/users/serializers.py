from __future__ import annotations

from typing import Any, Dict

from .service import SessionUser


def user_to_dict(user: SessionUser) -> Dict[str, Any]:
    return {
        "id": user.user_id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }
