from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import format_iso_date, now_local
from ..core.enums import EntryType, PresenceStatus, RecordFilter
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..location.resolver import LocationResolver
from ..parties.service import PartyService
from ..users.repository import UserRepository
from ..users.service import SessionUser
from .model import AdminOverview, AttendanceRecord, CheckIn, CheckOut, Entry, UserStats
from .reports import current_status, filter_records
from .repository import AttendanceRepository
from .stats import calculate_overview, calculate_user_stats

logger = logging.getLogger(__name__)


def parse_entry_type(value: Any) -> EntryType:
    try:
        return EntryType(value)
    except ValueError:
        raise ValidationError("Type must be 'check-in' or 'check-out'")


def parse_record_filter(value: Optional[str]) -> RecordFilter:
    try:
        return RecordFilter(value or RecordFilter.ALL.value)
    except ValueError:
        raise ValidationError("Status filter must be one of: all, complete, incomplete")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        parties: PartyService,
        locations: LocationResolver,
    ):
        self._attendance = attendance
        self._users = users
        self._parties = parties
        self._locations = locations

    def record_entry(
        self,
        caller: SessionUser,
        *,
        entry_type: Any,
        location: Optional[Mapping[str, Any]],
        party_id: Any = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Append a check-in or check-out to the caller's record for today."""
        now = now or now_local()
        kind = parse_entry_type(entry_type)

        # Validate everything before touching the store: no partial writes.
        entry: Entry
        if kind == EntryType.CHECK_IN:
            party = self._parties.get_active(party_id)
            entry = CheckIn(
                timestamp=now,
                location=self._locations.resolve(location),
                party_id=party.party_id,
                party_name=party.name,
            )
        else:
            entry = CheckOut(timestamp=now, location=self._locations.resolve(location))

        record = self._attendance.append_entry(
            user_id=caller.user_id,
            user_name=caller.name or "Unknown User",
            work_date=format_iso_date(now.date()),
            entry=entry,
        )
        logger.info(
            "User %s %s on %s (%d sessions, %.2fh)",
            caller.user_id,
            kind.value,
            record.date,
            len(record.sessions),
            record.total_hours,
        )
        return record

    def get_today_record(self, caller: SessionUser, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_user_and_date(caller.user_id, format_iso_date(today))

    def get_current_status(self, caller: SessionUser, *, today: Optional[date] = None) -> PresenceStatus:
        return current_status(self.get_today_record(caller, today=today))

    def list_records(
        self,
        caller: SessionUser,
        *,
        user_id: Optional[int] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Admins see everyone (optionally one user); users see only their own records."""
        record_filter = parse_record_filter(status)

        if caller.is_admin:
            records = self._attendance.list_all() if user_id is None else self._attendance.list_for_user(int(user_id))
        else:
            if user_id is not None and int(user_id) != caller.user_id:
                raise AuthorizationError("Access denied")
            records = self._attendance.list_for_user(caller.user_id)

        return filter_records(records, start=start, end=end, status=record_filter)

    def get_stats(
        self,
        caller: SessionUser,
        *,
        user_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> UserStats:
        today = today or now_local().date()
        target_id = caller.user_id if user_id is None else int(user_id)

        if target_id != caller.user_id:
            if not caller.is_admin:
                raise AuthorizationError("Access denied")
            if not self._users.get_by_id(target_id):
                raise NotFoundError("User not found")

        return calculate_user_stats(self._attendance.list_for_user(target_id), today=today)

    def get_overview(self, caller: SessionUser, *, today: Optional[date] = None) -> AdminOverview:
        if not caller.is_admin:
            raise AuthorizationError("Access denied")
        today = today or now_local().date()
        return calculate_overview(self._attendance.list_all(), today=today)
