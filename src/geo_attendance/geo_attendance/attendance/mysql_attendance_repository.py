from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import format_iso_date
from ..core.enums import EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..location.model import Location
from .model import AttendanceRecord, CheckIn, CheckOut, Entry
from .repository import AttendanceRepository
from .sessions import recompute

logger = logging.getLogger(__name__)

ER_LOCK_DEADLOCK = 1213
APPEND_ATTEMPTS = 3

_RECORD_COLUMNS = "record_id, user_id, user_name, work_date, total_hours, created_at, updated_at"
_ENTRY_COLUMNS = (
    "entry_id, record_id, entry_type, occurred_at, latitude, longitude, address, party_id, party_name"
)


def _row_to_entry(r: Dict[str, Any]) -> Entry:
    location = Location(
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        address=r.get("address") or "",
    )
    if EntryType(r["entry_type"]) == EntryType.CHECK_IN:
        return CheckIn(
            timestamp=r["occurred_at"],
            location=location,
            party_id=int(r["party_id"]),
            party_name=r.get("party_name") or "",
        )
    return CheckOut(timestamp=r["occurred_at"], location=location)


def _row_to_record(r: Dict[str, Any], entries: Sequence[Entry]) -> AttendanceRecord:
    work_date = r["work_date"]
    record = AttendanceRecord(
        record_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        date=work_date if isinstance(work_date, str) else format_iso_date(work_date),
        entries=tuple(entries),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )
    # Sessions are not stored; they are rebuilt from the entries on every load.
    return recompute(record)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_entries(self, cur, record_ids: Sequence[int]) -> Dict[int, List[Entry]]:
        out: Dict[int, List[Entry]] = defaultdict(list)
        if not record_ids:
            return out

        placeholders = ",".join(["%s"] * len(record_ids))
        cur.execute(
            f"""
            SELECT {_ENTRY_COLUMNS}
            FROM attendance_entries
            WHERE record_id IN ({placeholders})
            ORDER BY entry_id ASC
            """,
            tuple(record_ids),
        )
        for r in fetchall(cur):
            out[int(r["record_id"])].append(_row_to_entry(r))
        return out

    def _load_records(self, cur, where: str = "", params: tuple = ()) -> List[AttendanceRecord]:
        cur.execute(
            f"""
            SELECT {_RECORD_COLUMNS}
            FROM attendance_records
            {where}
            ORDER BY work_date DESC, user_id ASC
            """,
            params,
        )
        rows = fetchall(cur)
        entries = self._load_entries(cur, [int(r["record_id"]) for r in rows])
        return [_row_to_record(r, entries.get(int(r["record_id"]), [])) for r in rows]

    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            records = self._load_records(cur, "WHERE user_id=%s AND work_date=%s", (user_id, work_date))
            return records[0] if records else None

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load_records(cur, "WHERE user_id=%s", (user_id,))

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load_records(cur)

    def append_entry(
        self,
        *,
        user_id: int,
        user_name: str,
        work_date: str,
        entry: Entry,
    ) -> AttendanceRecord:
        attempt = 1
        while True:
            try:
                return self._append_entry_once(
                    user_id=user_id, user_name=user_name, work_date=work_date, entry=entry
                )
            except mysql.connector.errors.DatabaseError as e:
                if e.errno != ER_LOCK_DEADLOCK or attempt >= APPEND_ATTEMPTS:
                    raise
                logger.warning(
                    "Deadlock appending entry for user %s on %s (attempt %d), retrying",
                    user_id,
                    work_date,
                    attempt,
                )
                attempt += 1

    def _append_entry_once(
        self,
        *,
        user_id: int,
        user_name: str,
        work_date: str,
        entry: Entry,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # Create-or-touch on the unique (user_id, work_date) key; LAST_INSERT_ID
            # makes lastrowid point at the existing row on the duplicate path.
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, user_name, work_date, total_hours)
                VALUES(%s,%s,%s,0)
                ON DUPLICATE KEY UPDATE record_id=LAST_INSERT_ID(record_id)
                """,
                (user_id, user_name, work_date),
            )
            record_id = int(cur.lastrowid)

            # Row lock held until commit serialises concurrent appends for the day.
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE record_id=%s FOR UPDATE",
                (record_id,),
            )
            row = fetchone(cur)

            party_id = entry.party_id if isinstance(entry, CheckIn) else None
            party_name = entry.party_name if isinstance(entry, CheckIn) else None
            cur.execute(
                """
                INSERT INTO attendance_entries(
                    record_id, entry_type, occurred_at, latitude, longitude, address, party_id, party_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record_id,
                    entry.type.value,
                    entry.timestamp,
                    entry.location.latitude,
                    entry.location.longitude,
                    entry.location.address,
                    party_id,
                    party_name,
                ),
            )

            entries = self._load_entries(cur, [record_id]).get(record_id, [])
            record = _row_to_record(row, entries)

            cur.execute(
                "UPDATE attendance_records SET total_hours=%s WHERE record_id=%s",
                (record.total_hours, record_id),
            )
            return record
