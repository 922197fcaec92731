from __future__ import annotations

from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.attendance.model import AttendanceRecord, CheckIn, CheckOut
from src.geo_attendance.geo_attendance.attendance.sessions import (
    calculate_hours,
    calculate_sessions,
    recompute,
    total_hours,
    with_entry,
)
from src.geo_attendance.geo_attendance.location.model import Location

HERE = Location(latitude=10.77, longitude=106.7, address="Office")


def _in(h, m=0, *, party_id=1, party_name="Acme", s=0):
    return CheckIn(timestamp=datetime(2026, 3, 2, h, m, s), location=HERE, party_id=party_id, party_name=party_name)


def _out(h, m=0, s=0):
    return CheckOut(timestamp=datetime(2026, 3, 2, h, m, s), location=HERE)


def test_single_session_hours_and_party():
    sessions = calculate_sessions([_in(9), _out(17, 30)])

    assert len(sessions) == 1
    assert sessions[0].hours == 8.5
    assert sessions[0].party_id == 1
    assert sessions[0].party_name == "Acme"
    assert sessions[0].check_in == datetime(2026, 3, 2, 9, 0)
    assert sessions[0].check_out == datetime(2026, 3, 2, 17, 30)


def test_multiple_sessions_keep_their_own_party():
    entries = [
        _in(9),
        _out(12),
        _in(13, party_id=2, party_name="Globex"),
        _out(17, 15),
    ]
    sessions = calculate_sessions(entries)

    assert [s.hours for s in sessions] == [3.0, 4.25]
    assert [s.party_name for s in sessions] == ["Acme", "Globex"]
    assert total_hours(sessions) == 7.25


def test_out_of_order_entries_are_sorted_by_timestamp():
    sessions = calculate_sessions([_out(17), _in(9)])

    assert len(sessions) == 1
    assert sessions[0].hours == 8.0


def test_second_check_in_replaces_pending_one():
    entries = [_in(8, party_id=1), _in(9, party_id=2, party_name="Globex"), _out(11)]
    sessions = calculate_sessions(entries)

    assert len(sessions) == 1
    assert sessions[0].check_in == datetime(2026, 3, 2, 9, 0)
    assert sessions[0].party_name == "Globex"
    assert sessions[0].hours == 2.0


def test_unmatched_check_out_is_ignored():
    assert calculate_sessions([_out(8), _in(9), _out(10), _out(11)])[0].hours == 1.0
    assert len(calculate_sessions([_out(8), _in(9), _out(10), _out(11)])) == 1


def test_open_check_in_produces_no_session():
    assert calculate_sessions([_in(9)]) == []
    assert calculate_sessions([]) == []


def test_hours_round_half_up_to_two_decimals():
    start = datetime(2026, 3, 2, 9, 0, 0)

    # 18 seconds = 0.005 h exactly
    assert calculate_hours(start, datetime(2026, 3, 2, 9, 0, 18)) == 0.01
    # 17 seconds = 0.00472 h
    assert calculate_hours(start, datetime(2026, 3, 2, 9, 0, 17)) == 0.0
    assert calculate_hours(start, datetime(2026, 3, 2, 9, 20, 0)) == 0.33
    assert calculate_hours(start, start) == 0.0


def test_negative_duration_is_rejected():
    with pytest.raises(ValueError):
        calculate_hours(datetime(2026, 3, 2, 10), datetime(2026, 3, 2, 9))


def test_recompute_total_equals_sum_of_sessions():
    record = AttendanceRecord(record_id=1, user_id=2, user_name="John", date="2026-03-02")
    for entry in [_in(9), _out(12), _in(13), _out(14, 40), _in(15)]:
        record = with_entry(record, entry)

    assert len(record.entries) == 5
    assert [s.hours for s in record.sessions] == [3.0, 1.67]
    assert record.total_hours == pytest.approx(sum(s.hours for s in record.sessions))
    assert recompute(record) == record


def test_entries_keep_submission_order():
    record = AttendanceRecord(record_id=1, user_id=2, user_name="John", date="2026-03-02")
    record = with_entry(record, _out(17))
    record = with_entry(record, _in(9))

    assert [e.type.value for e in record.entries] == ["check-out", "check-in"]
    assert record.total_hours == 8.0


def test_session_count_never_exceeds_half_the_entries():
    # every in/out pattern up to six entries, at distinct and at colliding times
    for n in range(7):
        for mask in range(2**n):
            for minute_step in (0, 7):
                entries = [
                    _in(9, i * minute_step) if mask >> i & 1 else _out(9, i * minute_step)
                    for i in range(n)
                ]
                assert len(calculate_sessions(entries)) <= len(entries) // 2, entries


def test_equal_timestamps_keep_submission_order():
    in_then_out = calculate_sessions([_in(9), _out(9)])
    out_then_in = calculate_sessions([_out(9), _in(9)])

    assert len(in_then_out) == 1
    assert in_then_out[0].hours == 0.0
    assert out_then_in == []
