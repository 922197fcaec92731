from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Party


class PartyRepository(Protocol):
    def get_by_id(self, party_id: int) -> Optional[Party]:
        raise NotImplementedError

    def find_active_by_name(self, name: str, *, exclude_id: Optional[int] = None) -> Optional[Party]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Party]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Party]:
        raise NotImplementedError

    def create(self, *, name: str, description: str, created_by: int) -> int:
        raise NotImplementedError

    def update(self, *, party_id: int, name: str, description: str, is_active: bool) -> bool:
        raise NotImplementedError

    def set_active(self, party_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
