from __future__ import annotations

import csv
import io
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_date
from ..students.service import StudentService


def _writer(out: io.StringIO):
    # Comma separated, newline terminated; fields holding commas or quotes get quoted.
    return csv.writer(out, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)


class ReportService:
    def __init__(self, students: StudentService, attendance: AttendanceService):
        self._students = students
        self._attendance = attendance

    def export_attendance_csv(self, class_id: str) -> Optional[str]:
        """Wide format: one row per student, one column per attended date.

        Returns None when there is nothing to export.
        """

        students = self._students.list_students(class_id)
        records = self._attendance.list_for_class(class_id)
        if not students or not records:
            return None

        by_date: dict[str, dict[str, str]] = {}
        for r in records:
            by_date.setdefault(format_date(r.date), {})[r.student_id] = r.status.value
        dates = sorted(by_date)

        out = io.StringIO()
        writer = _writer(out)
        writer.writerow(["Student ID", "First Name", "Last Name", "Email", *dates])
        for s in students:
            writer.writerow([s.id, s.first_name, s.last_name, s.email, *(by_date[d].get(s.id, "") for d in dates)])
        return out.getvalue()

    def export_attendance_log_csv(self, class_id: str) -> Optional[str]:
        """One row per attendance entry: ``Date,Student,Status``."""

        records = self._attendance.list_for_class(class_id)
        if not records:
            return None

        names = {s.id: s.full_name for s in self._students.list_students(class_id)}
        rows = sorted(
            ((format_date(r.date), names.get(r.student_id, r.student_id), r.status.value) for r in records),
            key=lambda row: (row[0], row[1]),
        )

        out = io.StringIO()
        writer = _writer(out)
        writer.writerow(["Date", "Student", "Status"])
        writer.writerows(rows)
        return out.getvalue()
