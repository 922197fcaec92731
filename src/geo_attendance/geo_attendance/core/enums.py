from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    USER = "user"


class EntryType(str, Enum):
    """Kind of a single attendance event."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class RecordFilter(str, Enum):
    """Completeness filter for attendance reports."""

    ALL = "all"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class PresenceStatus(str, Enum):
    """Where a user stands today, judged from the last submitted entry."""

    NOT_STARTED = "not-started"
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"
