from __future__ import annotations

from typing import Any, Dict

from .model import Party


def party_to_dict(party: Party) -> Dict[str, Any]:
    return {
        "id": party.party_id,
        "name": party.name,
        "description": party.description,
        "isActive": party.is_active,
        "createdBy": {"id": party.created_by, "name": party.created_by_name} if party.created_by else None,
        "createdAt": party.created_at.isoformat() if party.created_at else None,
        "updatedAt": party.updated_at.isoformat() if party.updated_at else None,
    }
