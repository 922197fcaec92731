from __future__ import annotations

import csv
import io
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.enums import PresenceStatus, RecordFilter
from .model import AttendanceRecord, CheckIn

CSV_FIELDS = [
    "Date",
    "Employee",
    "Total Hours",
    "Sessions",
    "All Check-ins/Check-outs",
    "Locations",
]


def is_complete(record: AttendanceRecord) -> bool:
    return len(record.sessions) > 0


def is_incomplete(record: AttendanceRecord) -> bool:
    if not record.entries:
        return False
    return not record.sessions or isinstance(record.last_entry, CheckIn)


def filter_records(
    records: Iterable[AttendanceRecord],
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
    status: RecordFilter = RecordFilter.ALL,
) -> List[AttendanceRecord]:
    """Date range is inclusive; dates compare as YYYY-MM-DD strings."""
    out = list(records)
    if start:
        out = [r for r in out if r.date >= start]
    if end:
        out = [r for r in out if r.date <= end]

    if status == RecordFilter.COMPLETE:
        out = [r for r in out if is_complete(r)]
    elif status == RecordFilter.INCOMPLETE:
        out = [r for r in out if is_incomplete(r)]
    return out


def record_status(record: AttendanceRecord) -> str:
    if record.sessions:
        if isinstance(record.last_entry, CheckIn):
            return "In Progress"
        n = len(record.sessions)
        return f"{n} Session{'s' if n != 1 else ''}"
    if record.entries:
        return "Incomplete"
    return "No Data"


def current_status(record: Optional[AttendanceRecord]) -> PresenceStatus:
    if record is None or not record.entries:
        return PresenceStatus.NOT_STARTED
    if isinstance(record.last_entry, CheckIn):
        return PresenceStatus.CHECKED_IN
    return PresenceStatus.CHECKED_OUT


def _format_hours(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".") or "0"


def build_csv(records: Sequence[AttendanceRecord]) -> bytes:
    """Write report rows to CSV bytes (UTF-8 with BOM so spreadsheets pick it up)."""
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(CSV_FIELDS)
    for r in records:
        writer.writerow(
            [
                parse_iso_date(r.date).strftime("%A, %B %d, %Y"),
                r.user_name,
                _format_hours(r.total_hours or 0.0),
                str(len(r.sessions)),
                "; ".join(f"{e.type.value}: {e.timestamp.strftime('%I:%M %p')}" for e in r.entries),
                "; ".join(e.location.address or "N/A" for e in r.entries),
            ]
        )
    return out.getvalue().encode("utf-8-sig")
