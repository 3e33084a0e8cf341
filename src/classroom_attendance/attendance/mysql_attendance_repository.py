from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Attendance
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, class_id, date, status"


def _to_attendance(r: dict) -> Attendance:
    return Attendance(
        attendance_id=str(r["id"]),
        student_id=str(r["student_id"]),
        class_id=str(r["class_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find(self, *, student_id: str, class_id: str, on_date: date) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE student_id=%s AND class_id=%s AND date=%s
                """,
                (student_id, class_id, on_date),
            )
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def create(self, *, student_id: str, class_id: str, on_date: date, status: AttendanceStatus) -> Attendance:
        attendance_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(id, student_id, class_id, date, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (attendance_id, student_id, class_id, on_date, status.value),
            )
        return Attendance(
            attendance_id=attendance_id,
            student_id=student_id,
            class_id=class_id,
            date=on_date,
            status=status,
        )

    def update_status(self, attendance_id: str, status: AttendanceStatus) -> Attendance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance SET status=%s WHERE id=%s", (status.value, attendance_id))
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (attendance_id,))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Attendance {attendance_id} not found")
            return _to_attendance(r)

    def delete(self, attendance_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (attendance_id,))
            return cur.rowcount > 0

    def list_by_class_and_date(self, class_id: str, on_date: date) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE class_id=%s AND date=%s",
                (class_id, on_date),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def list_by_class(self, class_id: str) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE class_id=%s ORDER BY date ASC",
                (class_id,),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def list_by_student(self, student_id: str) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id=%s ORDER BY date DESC",
                (student_id,),
            )
            return [_to_attendance(r) for r in fetchall(cur)]
