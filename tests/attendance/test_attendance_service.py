from __future__ import annotations

from datetime import date

import pytest

from classroom_attendance.core.constants import CR_CONN_HOST_ERROR
from classroom_attendance.core.enums import AttendanceStatus
from classroom_attendance.core.exceptions import LocalFallbackUsed, RemoteError, ValidationError
from classroom_attendance.core.ids import LocalRef, RemoteRef
from classroom_attendance.students.model import Student


def test_local_student_marked_twice_keeps_one_record(container):
    svc = container.attendance_service
    svc.mark_attendance("temp-id-123", "c1", "2024-01-01", "late")
    record = svc.mark_attendance("temp-id-123", "c1", "2024-01-01", "present")

    stored = container.local_attendance.list_for("c1", date(2024, 1, 1))
    assert stored == [record]
    assert record.status == AttendanceStatus.PRESENT


def test_remote_student_upsert_updates_in_place(container, students_repo, attendance_repo, day):
    s = students_repo.add("Aarav", "Sharma", "aarav@niet.ac.in", "c1")
    svc = container.attendance_service

    first = svc.mark_attendance(s.ref, "c1", day, AttendanceStatus.ABSENT)
    second = svc.mark_attendance(s.ref, "c1", day, AttendanceStatus.EXCUSED)

    assert first.attendance_id == second.attendance_id
    assert list(attendance_repo.rows.values()) == [second]
    assert second.status == AttendanceStatus.EXCUSED
    assert container.local_attendance.list_for("c1", day) == []


def test_student_missing_remotely_without_cached_record_is_marked_under_its_id(container, attendance_repo, day):
    ghost = RemoteRef("11111111-1111-4111-8111-111111111111")

    with pytest.warns(LocalFallbackUsed):
        record = container.attendance_service.mark_attendance(ghost, "c1", day, "present")

    assert attendance_repo.rows == {}
    assert container.local_attendance.list_for("c1", day) == [record]


def test_student_missing_remotely_is_recreated_as_local_placeholder(container, attendance_repo, day):
    ghost = RemoteRef("11111111-1111-4111-8111-111111111111")
    cached = Student(ref=ghost, first_name="Sneha", last_name="Kapoor", email="sneha@niet.ac.in", class_id="c1")
    container.local_students.save_local(cached)
    container.local_students.save_local(cached.in_class("c2"))
    container.local_attendance.upsert(
        student_id=ghost.id, class_id="c1", on_date=date(2023, 12, 31), status=AttendanceStatus.LATE
    )

    with pytest.warns(LocalFallbackUsed):
        record = container.attendance_service.mark_attendance(ghost, "c1", day, "present")

    assert attendance_repo.rows == {}
    assert record.student_id.startswith("local-")
    assert container.local_students.find_local_by_id(ghost.id) is None

    placeholder = container.local_students.find_local_by_id(record.student_id)
    assert isinstance(placeholder.ref, LocalRef)
    assert (placeholder.first_name, placeholder.last_name, placeholder.class_id) == ("Sneha", "Kapoor", "c1")
    assert [s.id for s in container.local_students.list_local("c2")] == [record.student_id]
    assert [r.student_id for r in container.local_attendance.list_for_student(record.student_id)] == [
        record.student_id,
        record.student_id,
    ]

    report = container.report_service.export_attendance_csv("c1")
    assert f"{record.student_id},Sneha,Kapoor,sneha@niet.ac.in,late,present" in report.splitlines()


def test_foreign_key_failure_on_write_falls_back_to_local(container, students_repo, attendance_repo, day):
    s = students_repo.add("Priya", "Patel", "priya@niet.ac.in", "c1")
    # Student disappears between the lookup and the write.
    original_find = attendance_repo.find

    def find_then_vanish(**kwargs):
        students_repo.rows.pop(s.id, None)
        return original_find(**kwargs)

    attendance_repo.find = find_then_vanish

    with pytest.warns(LocalFallbackUsed):
        record = container.attendance_service.mark_attendance(s.ref, "c1", day, "late")

    assert attendance_repo.rows == {}
    assert container.local_attendance.list_for("c1", day) == [record]


def test_other_remote_failures_propagate(container, students_repo, attendance_repo, day):
    s = students_repo.add("Priya", "Patel", "priya@niet.ac.in", "c1")
    attendance_repo.write_error = RemoteError(CR_CONN_HOST_ERROR, "Lost connection")

    with pytest.raises(RemoteError):
        container.attendance_service.mark_attendance(s.ref, "c1", day, "late")
    assert container.local_attendance.list_for("c1", day) == []


def test_remote_write_replaces_stale_local_mark(container, students_repo, attendance_repo, day):
    s = students_repo.add("Rahul", "Kumar", "rahul@niet.ac.in", "c1")
    container.local_attendance.upsert(student_id=s.id, class_id="c1", on_date=day, status=AttendanceStatus.ABSENT)

    container.attendance_service.mark_attendance(s.ref, "c1", day, "present")

    assert container.local_attendance.list_for("c1", day) == []
    assert [r.status for r in container.attendance_service.get_attendance("c1", day)] == [AttendanceStatus.PRESENT]


def test_invalid_input_is_rejected(container, day):
    with pytest.raises(ValidationError):
        container.attendance_service.mark_attendance("temp-1", "c1", day, "sleeping")
    with pytest.raises(ValidationError):
        container.attendance_service.mark_attendance("temp-1", "c1", "01/01/2024", "present")


def test_reads_merge_remote_and_local(container, students_repo, attendance_repo):
    s = students_repo.add("Neha", "Gupta", "neha@niet.ac.in", "c1")
    svc = container.attendance_service
    svc.mark_attendance(s.ref, "c1", date(2024, 1, 1), "present")
    svc.mark_attendance("temp-2", "c1", date(2024, 1, 1), "absent")
    svc.mark_attendance("temp-2", "c1", date(2024, 1, 2), "late")

    assert len(svc.get_attendance("c1", date(2024, 1, 1))) == 2
    assert [r.date for r in svc.get_attendance_by_student("temp-2")] == [date(2024, 1, 2), date(2024, 1, 1)]
    assert svc.get_attendance_stats("c1") == {"present": 1, "absent": 1, "late": 1, "excused": 0}

    attendance_repo.offline = True
    with pytest.warns(LocalFallbackUsed):
        assert len(svc.list_for_class("c1")) == 2
