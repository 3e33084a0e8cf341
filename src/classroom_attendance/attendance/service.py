from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import as_date, format_date
from ..common.fallback import signal_local_fallback
from ..common.validators import require_non_empty, require_status
from ..core.enums import AttendanceStatus
from ..core.exceptions import RemoteError
from ..core.ids import StudentRef, as_ref, new_local_id
from ..students.local_repository import LocalStudentCache
from ..students.model import Student
from ..students.repository import StudentRepository
from ..sync.cross_class import CrossClassSync
from .local_repository import LocalAttendanceCache
from .model import Attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _merge(remote: Iterable[Attendance], local: Iterable[Attendance]) -> list[Attendance]:
    # Remote wins per (student, class, date).
    out = list(remote)
    seen = {(r.student_id, r.class_id, r.date) for r in out}
    for r in local:
        if (r.student_id, r.class_id, r.date) not in seen:
            out.append(r)
            seen.add((r.student_id, r.class_id, r.date))
    return out


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        local: LocalAttendanceCache,
        *,
        local_students: Optional[LocalStudentCache] = None,
        sync: Optional[CrossClassSync] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._local = local
        self._local_students = local_students
        self._sync = sync

    def mark_attendance(
        self,
        student: "StudentRef | str",
        class_id: str,
        on_date: "date | str",
        status: "AttendanceStatus | str",
    ) -> Attendance:
        """Find-or-create the single mark for (student, class, date).

        1. local student -> local cache;
        2. student unknown remotely -> recreate its cached record as a local
           placeholder and mark that (callers adopt the returned student id);
           with no cached record the mark is kept locally under the given id;
        3. otherwise update or insert the remote row;
        4. a foreign-key failure on that write -> local cache.
        Any other remote failure propagates.
        """

        ref = as_ref(student)
        class_id = require_non_empty(class_id, "Class")
        on_date = as_date(on_date)
        status = require_status(status)

        if ref.is_local:
            return self._mark_locally(ref.id, class_id, on_date, status)

        if self._students.get_by_id(ref.id) is None:
            placeholder = self._recreate_locally(ref.id, class_id)
            if placeholder is None:
                signal_local_fallback(f"Student {ref.id} is not in the remote store; attendance kept locally")
                return self._mark_locally(ref.id, class_id, on_date, status)
            signal_local_fallback(f"Student {ref.id} is not in the remote store; continuing as {placeholder.id}")
            return self._mark_locally(placeholder.id, class_id, on_date, status)

        try:
            existing = self._attendance.find(student_id=ref.id, class_id=class_id, on_date=on_date)
            if existing is not None:
                record = self._attendance.update_status(existing.attendance_id, status)
            else:
                record = self._attendance.create(student_id=ref.id, class_id=class_id, on_date=on_date, status=status)
        except RemoteError as e:
            if not e.is_foreign_key_violation:
                raise
            signal_local_fallback(f"Attendance for {ref.id} on {format_date(on_date)} kept locally ({e})")
            return self._mark_locally(ref.id, class_id, on_date, status)

        # A stale local mark for the same key would make two records.
        self._local.discard(student_id=ref.id, class_id=class_id, on_date=on_date)
        return record

    def _recreate_locally(self, student_id: str, class_id: str) -> Optional[Student]:
        if self._local_students is None:
            return None

        copies = self._local_students.reassign_id(student_id, new_local_id())
        if not copies:
            return None

        placeholder = next((s for s in copies if s.class_id == class_id), None)
        if placeholder is None:
            placeholder = self._local_students.save_local(copies[0].in_class(class_id))
        if self._sync is not None:
            self._sync.propagate(placeholder)
        return placeholder

    def _mark_locally(self, student_id: str, class_id: str, on_date: date, status: AttendanceStatus) -> Attendance:
        return self._local.upsert(student_id=student_id, class_id=class_id, on_date=on_date, status=status)

    def get_attendance(self, class_id: str, on_date: "date | str") -> list[Attendance]:
        on_date = as_date(on_date)
        try:
            remote = self._attendance.list_by_class_and_date(class_id, on_date)
        except RemoteError as e:
            signal_local_fallback(f"Could not load attendance of class {class_id} ({e}); using local cache only")
            remote = []
        return _merge(remote, self._local.list_for(class_id, on_date))

    def get_attendance_by_student(self, student: "StudentRef | str") -> list[Attendance]:
        ref = as_ref(student)
        local = self._local.list_for_student(ref.id)
        if ref.is_local:
            return local

        try:
            remote = self._attendance.list_by_student(ref.id)
        except RemoteError as e:
            signal_local_fallback(f"Could not load attendance of student {ref.id} ({e}); using local cache only")
            remote = []
        return sorted(_merge(remote, local), key=lambda r: r.date, reverse=True)

    def list_for_class(self, class_id: str) -> list[Attendance]:
        try:
            remote = self._attendance.list_by_class(class_id)
        except RemoteError as e:
            signal_local_fallback(f"Could not load attendance of class {class_id} ({e}); using local cache only")
            remote = []
        return sorted(_merge(remote, self._local.list_for_class(class_id)), key=lambda r: r.date)

    def get_attendance_stats(self, class_id: str) -> dict[str, int]:
        stats = {s.value: 0 for s in AttendanceStatus}
        for r in self.list_for_class(class_id):
            stats[r.status.value] += 1
        return stats
