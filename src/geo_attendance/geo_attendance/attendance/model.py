from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional, Tuple, Union

from ..core.enums import EntryType
from ..location.model import Location


@dataclass(frozen=True)
class CheckIn:
    """Opening event of a session. Always names the party being worked for."""

    type: ClassVar[EntryType] = EntryType.CHECK_IN

    timestamp: datetime
    location: Location
    party_id: int
    party_name: str


@dataclass(frozen=True)
class CheckOut:
    """Closing event of a session. The party comes from the matching check-in."""

    type: ClassVar[EntryType] = EntryType.CHECK_OUT

    timestamp: datetime
    location: Location


Entry = Union[CheckIn, CheckOut]


@dataclass(frozen=True)
class Session:
    """A matched check-in/check-out pair. Derived, never edited directly."""

    check_in: datetime
    check_out: datetime
    hours: float
    party_id: Optional[int] = None
    party_name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: everything one user did on one calendar day.

    `entries` keep submission order; `sessions` are always rebuilt from the
    entries sorted by timestamp, and `total_hours` is their sum.
    """

    record_id: Optional[int]
    user_id: int
    user_name: str
    date: str
    entries: Tuple[Entry, ...] = ()
    sessions: Tuple[Session, ...] = ()
    total_hours: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_check_in(self) -> bool:
        return any(isinstance(e, CheckIn) for e in self.entries)

    @property
    def last_entry(self) -> Optional[Entry]:
        return self.entries[-1] if self.entries else None


@dataclass(frozen=True)
class UserStats:
    total_working_days: int = 0
    total_leave_days: int = 0
    total_working_hours: float = 0.0
    monthly_hours: float = 0.0
    average_hours_per_day: float = 0.0
    current_month_working_days: int = 0
    current_month_leave_days: int = 0


@dataclass(frozen=True)
class AdminOverview:
    """Read-model for the admin dashboard (all users at once)."""

    total_employees: int
    today_present: int
    today_absent: int
    average_hours_per_day: float
    total_hours_this_month: float
    total_working_days: int
    total_leave_days: int
    user_stats: dict = field(default_factory=dict)
