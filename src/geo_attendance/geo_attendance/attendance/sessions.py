"""Derive sessions from the raw check-in/check-out entries of a day."""
from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from ..core.constants import HOURS_PRECISION, MILLIS_PER_HOUR
from .model import AttendanceRecord, CheckIn, CheckOut, Entry, Session


def calculate_hours(check_in: datetime, check_out: datetime) -> float:
    """Elapsed wall-clock hours, rounded half-up to two decimals."""
    if check_out < check_in:
        raise ValueError("check-out cannot be earlier than check-in")

    elapsed_ms = (check_out - check_in) // timedelta(milliseconds=1)
    scale = 10**HOURS_PRECISION
    return math.floor(elapsed_ms / MILLIS_PER_HOUR * scale + 0.5) / scale


def calculate_sessions(entries: Iterable[Entry]) -> List[Session]:
    # sorted() is stable, so equal timestamps keep submission order.
    ordered = sorted(entries, key=lambda e: e.timestamp)

    sessions: List[Session] = []
    pending: Optional[CheckIn] = None

    for entry in ordered:
        if isinstance(entry, CheckIn):
            pending = entry
        elif isinstance(entry, CheckOut) and pending is not None:
            sessions.append(
                Session(
                    check_in=pending.timestamp,
                    check_out=entry.timestamp,
                    hours=calculate_hours(pending.timestamp, entry.timestamp),
                    party_id=pending.party_id,
                    party_name=pending.party_name,
                )
            )
            pending = None

    return sessions


def total_hours(sessions: Sequence[Session]) -> float:
    return sum((s.hours for s in sessions), 0.0)


def recompute(record: AttendanceRecord) -> AttendanceRecord:
    """Return the record with sessions and total hours rebuilt from its entries."""
    sessions = tuple(calculate_sessions(record.entries))
    return replace(record, sessions=sessions, total_hours=total_hours(sessions))


def with_entry(record: AttendanceRecord, entry: Entry) -> AttendanceRecord:
    return recompute(replace(record, entries=record.entries + (entry,)))
