from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import Attendance


class AttendanceRepository(Protocol):
    """Remote store interface for attendance marks.

    Writes for a student unknown to the remote store fail with a foreign-key
    ``RemoteError``.
    """

    def find(self, *, student_id: str, class_id: str, on_date: date) -> Optional[Attendance]:
        raise NotImplementedError

    def create(self, *, student_id: str, class_id: str, on_date: date, status: AttendanceStatus) -> Attendance:
        raise NotImplementedError

    def update_status(self, attendance_id: str, status: AttendanceStatus) -> Attendance:
        """Raises ``NotFoundError`` when the row does not exist."""

        raise NotImplementedError

    def delete(self, attendance_id: str) -> bool:
        raise NotImplementedError

    def list_by_class_and_date(self, class_id: str, on_date: date) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_by_class(self, class_id: str) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_by_student(self, student_id: str) -> Sequence[Attendance]:
        raise NotImplementedError
