from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Party:
    """Domain entity: a client or project a check-in is made for."""

    party_id: int
    name: str
    description: str
    is_active: bool
    created_by: Optional[int]
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
