"""Summary metrics over attendance records.

Leave figures are an approximation: every calendar day since the first record
counts as a potential working day (no weekends, holidays or approved leave).
`today` is passed in by the caller instead of being read from the clock.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, List, Sequence

from ..common.datetime_utils import days_in_month, format_iso_date, parse_iso_date
from .model import AdminOverview, AttendanceRecord, UserStats


def _working_days(records: Sequence[AttendanceRecord]) -> int:
    return sum(1 for r in records if r.has_check_in)


def _hours(records: Sequence[AttendanceRecord]) -> float:
    return sum((r.total_hours or 0.0 for r in records), 0.0)


def _in_month(record: AttendanceRecord, today: date) -> bool:
    d = parse_iso_date(record.date)
    return d.year == today.year and d.month == today.month


def calculate_user_stats(records: Sequence[AttendanceRecord], *, today: date) -> UserStats:
    total_working_days = _working_days(records)
    total_working_hours = _hours(records)

    monthly = [r for r in records if _in_month(r, today)]
    current_month_working_days = _working_days(monthly)
    monthly_hours = _hours(monthly)

    month_days_so_far = min(today.day, days_in_month(today.year, today.month))
    current_month_leave_days = max(0, month_days_so_far - current_month_working_days)

    days_tracked = 0
    if records:
        earliest = min(parse_iso_date(r.date) for r in records)
        days_tracked = max(0, (today - earliest).days + 1)
    total_leave_days = max(0, days_tracked - total_working_days)

    average = total_working_hours / total_working_days if total_working_days > 0 else 0.0

    return UserStats(
        total_working_days=total_working_days,
        total_leave_days=total_leave_days,
        total_working_hours=total_working_hours,
        monthly_hours=monthly_hours,
        average_hours_per_day=average,
        current_month_working_days=current_month_working_days,
        current_month_leave_days=current_month_leave_days,
    )


def calculate_overview(records: Sequence[AttendanceRecord], *, today: date) -> AdminOverview:
    by_user: Dict[int, List[AttendanceRecord]] = defaultdict(list)
    for r in records:
        by_user[r.user_id].append(r)

    today_s = format_iso_date(today)
    today_present = sum(1 for r in records if r.date == today_s and r.has_check_in)
    total_employees = len(by_user)

    completed = [r for r in records if (r.total_hours or 0) > 0]
    average = _hours(completed) / len(completed) if completed else 0.0

    user_stats = {user_id: calculate_user_stats(rs, today=today) for user_id, rs in by_user.items()}

    return AdminOverview(
        total_employees=total_employees,
        today_present=today_present,
        today_absent=max(0, total_employees - today_present),
        average_hours_per_day=average,
        total_hours_this_month=_hours([r for r in records if _in_month(r, today)]),
        total_working_days=sum(s.total_working_days for s in user_stats.values()),
        total_leave_days=sum(s.total_leave_days for s in user_stats.values()),
        user_stats=user_stats,
    )
