from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..cache.documents import read_json_list, write_json_list
from ..cache.kv_store import KeyValueStore
from ..common.datetime_utils import format_date
from ..core.constants import ATTENDANCE_PREFIX
from ..core.enums import AttendanceStatus
from ..core.ids import new_local_id
from .model import Attendance

logger = logging.getLogger(__name__)


def attendance_key(class_id: str, on_date: date) -> str:
    return f"{ATTENDANCE_PREFIX}{class_id}_{format_date(on_date)}"


class LocalAttendanceCache:
    """Attendance fallback storage keyed by ``attendance_<classId>_<date>``.

    At most one entry per student inside a key; the find-then-write is not
    protected against concurrent writers.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    def _load(self, key: str) -> list[Attendance]:
        out: list[Attendance] = []
        for item in read_json_list(self._store, key):
            try:
                out.append(Attendance.from_dict(item))
            except (KeyError, ValueError):
                logger.error("Skipping malformed attendance entry under %s: %r", key, item)
        return out

    def _save(self, key: str, records: Sequence[Attendance]) -> None:
        write_json_list(self._store, key, (r.to_dict() for r in records))

    def _class_keys(self, class_id: str) -> list[str]:
        prefix = f"{ATTENDANCE_PREFIX}{class_id}_"
        # A class id sharing our prefix leaves an '_' in the remainder; dates never do.
        return [k for k in self._store.keys(prefix) if "_" not in k[len(prefix):]]

    def list_for(self, class_id: str, on_date: date) -> list[Attendance]:
        return self._load(attendance_key(class_id, on_date))

    def upsert(self, *, student_id: str, class_id: str, on_date: date, status: AttendanceStatus) -> Attendance:
        key = attendance_key(class_id, on_date)
        records = self._load(key)

        for i, r in enumerate(records):
            if r.student_id == student_id:
                records[i] = r.with_status(status)
                self._save(key, records)
                return records[i]

        record = Attendance(
            attendance_id=new_local_id(),
            student_id=student_id,
            class_id=class_id,
            date=on_date,
            status=status,
        )
        records.append(record)
        self._save(key, records)
        return record

    def list_for_class(self, class_id: str) -> list[Attendance]:
        out: list[Attendance] = []
        for key in self._class_keys(class_id):
            out.extend(self._load(key))
        out.sort(key=lambda r: r.date)
        return out

    def list_for_student(self, student_id: str) -> list[Attendance]:
        out: list[Attendance] = []
        for key in self._store.keys(ATTENDANCE_PREFIX):
            out.extend(r for r in self._load(key) if r.student_id == student_id)
        out.sort(key=lambda r: r.date, reverse=True)
        return out

    def remove_student(self, student_id: str) -> int:
        removed = 0
        for key in self._store.keys(ATTENDANCE_PREFIX):
            records = self._load(key)
            kept = [r for r in records if r.student_id != student_id]
            if len(kept) != len(records):
                self._save(key, kept)
                removed += len(records) - len(kept)
        return removed

    def reassign_student(self, old_id: str, new_id: str) -> int:
        moved = 0
        for key in self._store.keys(ATTENDANCE_PREFIX):
            records = self._load(key)
            hits = sum(1 for r in records if r.student_id == old_id)
            if hits:
                self._save(key, [r.for_student(new_id) if r.student_id == old_id else r for r in records])
                moved += hits
        return moved

    def drop_class(self, class_id: str) -> int:
        keys = self._class_keys(class_id)
        for key in keys:
            self._store.delete(key)
        return len(keys)

    def discard(self, *, student_id: str, class_id: str, on_date: date) -> bool:
        key = attendance_key(class_id, on_date)
        records = self._load(key)
        kept = [r for r in records if r.student_id != student_id]
        if len(kept) == len(records):
            return False
        self._save(key, kept)
        return True
