from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Mapping

from ..common.datetime_utils import as_date, format_date
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Attendance:
    """Domain entity: the mark of one student in one class on one date."""

    attendance_id: str
    student_id: str
    class_id: str
    date: date
    status: AttendanceStatus

    def with_status(self, status: AttendanceStatus) -> "Attendance":
        return replace(self, status=status)

    def for_student(self, student_id: str) -> "Attendance":
        return replace(self, student_id=student_id)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "classId": self.class_id,
            "date": format_date(self.date),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attendance":
        return cls(
            attendance_id=str(data["id"]),
            student_id=str(data["studentId"]),
            class_id=str(data["classId"]),
            date=as_date(data["date"]),
            status=AttendanceStatus(data["status"]),
        )
