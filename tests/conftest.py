from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import pytest

from classroom_attendance.attendance.model import Attendance
from classroom_attendance.cache.kv_store import InMemoryKeyValueStore
from classroom_attendance.classes.model import ClassRoom
from classroom_attendance.container import assemble_container
from classroom_attendance.core.constants import CR_CONN_HOST_ERROR, ER_DUP_ENTRY, ER_NO_REFERENCED_ROW_2
from classroom_attendance.core.enums import AttendanceStatus
from classroom_attendance.core.exceptions import NotFoundError, RemoteError
from classroom_attendance.core.ids import RemoteRef
from classroom_attendance.students.model import Student, StudentDraft


def offline_error() -> RemoteError:
    return RemoteError(CR_CONN_HOST_ERROR, "Can't connect to MySQL server")


class InMemoryClasses:
    def __init__(self):
        self.rows: dict[str, ClassRoom] = {}
        self.offline = False

    def _check(self):
        if self.offline:
            raise offline_error()

    def list_for_user(self, user_id):
        self._check()
        return [c for c in self.rows.values() if c.user_id == user_id]

    def list_all(self):
        self._check()
        return list(self.rows.values())

    def get_by_id(self, class_id):
        self._check()
        return self.rows.get(class_id)

    def create(self, *, name, description, schedule, user_id):
        self._check()
        c = ClassRoom(
            class_id=str(uuid.uuid4()),
            name=name,
            description=description,
            schedule=schedule,
            user_id=user_id,
            created_at=datetime(2024, 1, 1, 9, 0),
        )
        self.rows[c.class_id] = c
        return c

    def update(self, class_id, changes):
        self._check()
        c = self.rows.get(class_id)
        if not c:
            raise NotFoundError(f"Class {class_id} not found")
        self.rows[class_id] = ClassRoom(
            class_id=c.class_id,
            name=changes.get("name", c.name),
            description=changes.get("description", c.description),
            schedule=changes.get("schedule", c.schedule),
            user_id=c.user_id,
            created_at=c.created_at,
        )
        return self.rows[class_id]

    def delete(self, class_id):
        self._check()
        return self.rows.pop(class_id, None) is not None


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[str, Student] = {}
        self.offline = False

    def _check(self):
        if self.offline:
            raise offline_error()

    def add(self, first_name, last_name, email, class_id) -> Student:
        return self.create(StudentDraft(first_name, last_name, email, class_id))

    def list_by_class(self, class_id):
        self._check()
        return sorted((s for s in self.rows.values() if s.class_id == class_id), key=lambda s: s.first_name)

    def get_by_id(self, student_id):
        self._check()
        return self.rows.get(student_id)

    def find_in_class_by_email(self, class_id, email):
        self._check()
        return next((s for s in self.rows.values() if s.class_id == class_id and s.email == email), None)

    def find_in_class_by_name(self, class_id, first_name, last_name):
        self._check()
        return next(
            (
                s
                for s in self.rows.values()
                if s.class_id == class_id and s.first_name == first_name and s.last_name == last_name
            ),
            None,
        )

    def create(self, draft: StudentDraft):
        self._check()
        if draft.email and self.find_in_class_by_email(draft.class_id, draft.email):
            raise RemoteError(ER_DUP_ENTRY, f"Duplicate entry '{draft.email}' for key 'uq_students_class_email'")
        s = Student(
            ref=RemoteRef(str(uuid.uuid4())),
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=draft.email,
            class_id=draft.class_id,
        )
        self.rows[s.id] = s
        return s

    def update(self, student_id, changes):
        self._check()
        s = self.rows.get(student_id)
        if not s:
            raise NotFoundError(f"Student {student_id} not found")
        self.rows[student_id] = Student(
            ref=s.ref,
            first_name=changes.get("first_name", s.first_name),
            last_name=changes.get("last_name", s.last_name),
            email=changes.get("email", s.email),
            class_id=changes.get("class_id", s.class_id),
        )
        return self.rows[student_id]

    def delete(self, student_id):
        self._check()
        return self.rows.pop(student_id, None) is not None


class InMemoryAttendance:
    """Enforces the foreign key on students like the real schema."""

    def __init__(self, students: InMemoryStudents):
        self.rows: dict[str, Attendance] = {}
        self.students = students
        self.offline = False
        self.write_error: Optional[RemoteError] = None

    def _check(self):
        if self.offline:
            raise offline_error()

    def _check_write(self, student_id):
        self._check()
        if self.write_error is not None:
            raise self.write_error
        if student_id not in self.students.rows:
            raise RemoteError(ER_NO_REFERENCED_ROW_2, "Cannot add or update a child row: a foreign key constraint fails")

    def find(self, *, student_id, class_id, on_date):
        self._check()
        return next(
            (
                r
                for r in self.rows.values()
                if r.student_id == student_id and r.class_id == class_id and r.date == on_date
            ),
            None,
        )

    def create(self, *, student_id, class_id, on_date, status):
        self._check_write(student_id)
        r = Attendance(
            attendance_id=str(uuid.uuid4()),
            student_id=student_id,
            class_id=class_id,
            date=on_date,
            status=status,
        )
        self.rows[r.attendance_id] = r
        return r

    def update_status(self, attendance_id, status):
        r = self.rows.get(attendance_id)
        if not r:
            raise NotFoundError(f"Attendance {attendance_id} not found")
        self._check_write(r.student_id)
        self.rows[attendance_id] = r.with_status(status)
        return self.rows[attendance_id]

    def delete(self, attendance_id):
        self._check()
        return self.rows.pop(attendance_id, None) is not None

    def list_by_class_and_date(self, class_id, on_date):
        self._check()
        return [r for r in self.rows.values() if r.class_id == class_id and r.date == on_date]

    def list_by_class(self, class_id):
        self._check()
        return sorted((r for r in self.rows.values() if r.class_id == class_id), key=lambda r: r.date)

    def list_by_student(self, student_id):
        self._check()
        return [r for r in self.rows.values() if r.student_id == student_id]


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def classes_repo():
    return InMemoryClasses()


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def attendance_repo(students_repo):
    return InMemoryAttendance(students_repo)


@pytest.fixture
def container(classes_repo, students_repo, attendance_repo, kv):
    return assemble_container(
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        kv_store=kv,
    )


@pytest.fixture
def day():
    return date(2024, 1, 1)
