from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, Entry


class AttendanceRepository(Protocol):
    """Storage contract for daily attendance records.

    Records are unique per (user_id, date). Lists come back newest date first.
    """

    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def append_entry(
        self,
        *,
        user_id: int,
        user_name: str,
        work_date: str,
        entry: Entry,
    ) -> AttendanceRecord:
        """Atomically create-or-load the day's record, append and recompute.

        Two concurrent calls for the same (user_id, work_date) must both land:
        no duplicate-key error and no lost entry.
        """

        raise NotImplementedError
