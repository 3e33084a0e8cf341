from __future__ import annotations

import json
from datetime import date

from classroom_attendance.attendance.local_repository import LocalAttendanceCache
from classroom_attendance.core.enums import AttendanceStatus


def test_upsert_writes_one_entry_per_student(kv, day):
    cache = LocalAttendanceCache(kv)
    first = cache.upsert(student_id="temp-id-123", class_id="c1", on_date=day, status=AttendanceStatus.LATE)
    second = cache.upsert(student_id="temp-id-123", class_id="c1", on_date=day, status=AttendanceStatus.PRESENT)

    assert first.attendance_id == second.attendance_id
    stored = json.loads(kv.get("attendance_c1_2024-01-01"))
    assert len(stored) == 1
    assert stored[0]["status"] == "present"
    assert stored[0]["studentId"] == "temp-id-123"


def test_list_for_class_ignores_classes_sharing_a_prefix(kv):
    cache = LocalAttendanceCache(kv)
    cache.upsert(student_id="s1", class_id="c1", on_date=date(2024, 1, 2), status=AttendanceStatus.ABSENT)
    cache.upsert(student_id="s1", class_id="c1", on_date=date(2024, 1, 1), status=AttendanceStatus.PRESENT)
    cache.upsert(student_id="s1", class_id="c1_b", on_date=date(2024, 1, 1), status=AttendanceStatus.LATE)

    records = cache.list_for_class("c1")
    assert [r.date for r in records] == [date(2024, 1, 1), date(2024, 1, 2)]
    assert cache.drop_class("c1") == 2
    assert len(cache.list_for_class("c1_b")) == 1


def test_discard_removes_only_that_student(kv, day):
    cache = LocalAttendanceCache(kv)
    cache.upsert(student_id="s1", class_id="c1", on_date=day, status=AttendanceStatus.PRESENT)
    cache.upsert(student_id="s2", class_id="c1", on_date=day, status=AttendanceStatus.ABSENT)

    assert cache.discard(student_id="s1", class_id="c1", on_date=day) is True
    assert [r.student_id for r in cache.list_for("c1", day)] == ["s2"]
    assert cache.discard(student_id="s1", class_id="c1", on_date=day) is False
