from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import NotFoundError
from ..core.ids import RemoteRef
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentDraft
from .repository import StudentRepository

_COLUMNS = "id, first_name, last_name, email, class_id"
_UPDATABLE = {"first_name": "first_name", "last_name": "last_name", "email": "email", "class_id": "class_id"}


def _to_student(r: dict) -> Student:
    return Student(
        ref=RemoteRef(str(r["id"])),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r.get("email") or "",
        class_id=str(r["class_id"]),
    )


def _email_param(email: str) -> Optional[str]:
    # Stored as NULL when empty so UNIQUE(class_id, email) ignores it.
    return email.strip() or None


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_class(self, class_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE class_id=%s ORDER BY first_name",
                (str(class_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (str(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def find_in_class_by_email(self, class_id: str, email: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE class_id=%s AND email=%s LIMIT 1",
                (str(class_id), email),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def find_in_class_by_name(self, class_id: str, first_name: str, last_name: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM students
                WHERE class_id=%s AND first_name=%s AND last_name=%s
                LIMIT 1
                """,
                (str(class_id), first_name, last_name),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create(self, draft: StudentDraft) -> Student:
        student_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(id, first_name, last_name, email, class_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (student_id, draft.first_name, draft.last_name, _email_param(draft.email), draft.class_id),
            )
        return Student(
            ref=RemoteRef(student_id),
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=draft.email,
            class_id=draft.class_id,
        )

    def update(self, student_id: str, changes: Mapping[str, Any]) -> Student:
        sets: list[str] = []
        params: list[object] = []
        for key, col in _UPDATABLE.items():
            if key in changes:
                sets.append(f"{col}=%s")
                params.append(_email_param(changes[key]) if key == "email" else changes[key])

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(f"UPDATE students SET {', '.join(sets)} WHERE id=%s", (*params, str(student_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (str(student_id),))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Student {student_id} not found")
            return _to_student(r)

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (str(student_id),))
            return cur.rowcount > 0
