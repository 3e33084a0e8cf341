from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance mark stored for a student on a class date."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"
