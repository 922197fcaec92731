from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import parse_bool, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Party
from .repository import PartyRepository

logger = logging.getLogger(__name__)


class PartyService:
    """Use case: maintain the party list. Everything but the active list is admin-only."""

    def __init__(self, parties: PartyRepository):
        self._parties = parties

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied")

    def _get_or_404(self, party_id: int) -> Party:
        party = self._parties.get_by_id(int(party_id))
        if not party:
            raise NotFoundError("Party not found")
        return party

    def list_active(self) -> Sequence[Party]:
        return self._parties.list_active()

    def list_all(self, *, current_role: Role) -> Sequence[Party]:
        self._require_admin(current_role)
        return self._parties.list_all()

    def get_active(self, party_id: Optional[int]) -> Party:
        """Party referenced by a check-in; must exist and be active."""
        if party_id in (None, ""):
            raise ValidationError("Party selection is required for check-in")
        if isinstance(party_id, bool):
            raise ValidationError("Invalid party selected")
        try:
            party_id = int(party_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid party selected")

        party = self._parties.get_by_id(party_id)
        if not party or not party.is_active:
            raise ValidationError("Invalid party selected")
        return party

    def create(self, *, current_role: Role, created_by: int, name: str, description: Optional[str] = None) -> Party:
        self._require_admin(current_role)

        name = require_non_empty(name, "Party name")
        if self._parties.find_active_by_name(name):
            raise ValidationError("Party name already exists")

        party_id = self._parties.create(
            name=name,
            description=(description or "").strip(),
            created_by=int(created_by),
        )
        logger.info("Party %s (%r) created by user %s", party_id, name, created_by)
        return self._get_or_404(party_id)

    def update(
        self,
        *,
        current_role: Role,
        party_id: int,
        name: str,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Party:
        self._require_admin(current_role)

        name = require_non_empty(name, "Party name")
        if self._parties.find_active_by_name(name, exclude_id=int(party_id)):
            raise ValidationError("Party name already exists")

        self._get_or_404(party_id)
        self._parties.update(
            party_id=int(party_id),
            name=name,
            description=(description or "").strip(),
            is_active=True if is_active is None else parse_bool(is_active, "isActive"),
        )
        return self._get_or_404(party_id)

    def delete(self, *, current_role: Role, party_id: int) -> None:
        """Soft delete: the party stays referenced by past sessions."""
        self._require_admin(current_role)

        self._get_or_404(party_id)
        self._parties.set_active(int(party_id), is_active=False)
        logger.info("Party %s deactivated", party_id)
