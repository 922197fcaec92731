"""JSON shapes returned by the attendance API (camelCase, ISO timestamps)."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..location.model import Location
from .model import AdminOverview, AttendanceRecord, CheckIn, Entry, Session, UserStats
from .reports import record_status


def location_to_dict(location: Location) -> Dict[str, Any]:
    return {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "address": location.address,
    }


def entry_to_dict(entry: Entry) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": entry.type.value,
        "timestamp": entry.timestamp.isoformat(),
        "location": location_to_dict(entry.location),
    }
    if isinstance(entry, CheckIn):
        out["partyId"] = entry.party_id
        out["partyName"] = entry.party_name
    return out


def session_to_dict(session: Session) -> Dict[str, Any]:
    return {
        "checkIn": session.check_in.isoformat(),
        "checkOut": session.check_out.isoformat(),
        "hours": session.hours,
        "partyId": session.party_id,
        "partyName": session.party_name,
    }


def record_to_dict(record: Optional[AttendanceRecord]) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    return {
        "id": record.record_id,
        "userId": record.user_id,
        "userName": record.user_name,
        "date": record.date,
        "entries": [entry_to_dict(e) for e in record.entries],
        "sessions": [session_to_dict(s) for s in record.sessions],
        "totalHours": record.total_hours,
        "status": record_status(record),
        "createdAt": record.created_at.isoformat() if record.created_at else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    }


def stats_to_dict(stats: UserStats) -> Dict[str, Any]:
    return {
        "totalWorkingDays": stats.total_working_days,
        "totalLeaveDays": stats.total_leave_days,
        "totalWorkingHours": stats.total_working_hours,
        "monthlyHours": stats.monthly_hours,
        "averageHoursPerDay": stats.average_hours_per_day,
        "currentMonthWorkingDays": stats.current_month_working_days,
        "currentMonthLeaveDays": stats.current_month_leave_days,
    }


def overview_to_dict(overview: AdminOverview) -> Dict[str, Any]:
    return {
        "totalEmployees": overview.total_employees,
        "todayPresent": overview.today_present,
        "todayAbsent": overview.today_absent,
        "avgHoursPerDay": overview.average_hours_per_day,
        "totalHoursThisMonth": overview.total_hours_this_month,
        "totalWorkingDays": overview.total_working_days,
        "totalLeaveDays": overview.total_leave_days,
        "userStats": {str(uid): stats_to_dict(s) for uid, s in overview.user_stats.items()},
    }
