from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from ..attendance.local_repository import LocalAttendanceCache
from ..cache.documents import read_json_list, write_json_list
from ..cache.kv_store import KeyValueStore
from ..core.constants import LOCAL_STUDENTS_PREFIX
from ..core.ids import LocalRef
from .model import Student

logger = logging.getLogger(__name__)


def students_key(class_id: str) -> str:
    return f"{LOCAL_STUDENTS_PREFIX}{class_id}"


class LocalStudentCache:
    """Per-class student lists stored under ``local_students_<classId>``.

    The owning class of an id is not part of the key, so a lookup by id would
    have to scan every class (O(number of classes)). We keep a secondary index
    student id -> class ids instead; it is built by one such scan on first use
    and maintained by every write that goes through this object. Writes by
    anyone else are picked up by rescanning when a lookup misses. The same id
    may live in several classes once it has been propagated.
    """

    def __init__(self, store: KeyValueStore, attendance: Optional[LocalAttendanceCache] = None):
        self._store = store
        self._attendance = attendance
        self._owners: Optional[dict[str, list[str]]] = None

    # --- index -----------------------------------------------------------

    def rebuild_index(self) -> None:
        owners: dict[str, list[str]] = {}
        for class_id in self.class_ids():
            for s in self.list_local(class_id):
                owners.setdefault(s.id, [])
                if class_id not in owners[s.id]:
                    owners[s.id].append(class_id)
        self._owners = owners

    def _index(self) -> dict[str, list[str]]:
        if self._owners is None:
            self.rebuild_index()
        return self._owners

    def _index_add(self, student_id: str, class_id: str) -> None:
        classes = self._index().setdefault(student_id, [])
        if class_id not in classes:
            classes.append(class_id)

    def _index_remove(self, student_id: str, class_id: str) -> None:
        index = self._index()
        classes = index.get(student_id, [])
        if class_id in classes:
            classes.remove(class_id)
        if not classes:
            index.pop(student_id, None)

    # --- per-class collections -------------------------------------------

    def _save_class(self, class_id: str, students: list[Student]) -> None:
        write_json_list(self._store, students_key(class_id), (s.to_dict() for s in students))

    def class_ids(self) -> list[str]:
        return [k[len(LOCAL_STUDENTS_PREFIX):] for k in self._store.keys(LOCAL_STUDENTS_PREFIX)]

    def list_local(self, class_id: str) -> list[Student]:
        key = students_key(class_id)
        out: list[Student] = []
        for item in read_json_list(self._store, key):
            try:
                out.append(Student.from_dict(item))
            except KeyError:
                logger.error("Skipping local student without id under %s: %r", key, item)
        return out

    def all_local(self) -> list[Student]:
        out: list[Student] = []
        for class_id in self.class_ids():
            out.extend(self.list_local(class_id))
        return out

    def save_local(self, student: Student) -> Student:
        """Insert or replace (by id) inside the student's own class."""

        students = self.list_local(student.class_id)
        for i, s in enumerate(students):
            if s.id == student.id:
                students[i] = student
                break
        else:
            students.append(student)
        self._save_class(student.class_id, students)
        self._index_add(student.id, student.class_id)
        return student

    def find_local_by_id(self, student_id: str) -> Optional[Student]:
        copies = self.find_local_copies(student_id)
        return copies[0] if copies else None

    def _by_owner(self, student_id: str, action: Callable[[list[str]], Any]) -> Any:
        # Another writer to the same store leaves our index stale; a miss
        # rebuilds it from the store and retries once.
        result = action(list(self._index().get(student_id, [])))
        if result:
            return result
        self.rebuild_index()
        return action(list(self._index().get(student_id, [])))

    def find_local_copies(self, student_id: str) -> list[Student]:
        def collect(class_ids: list[str]) -> list[Student]:
            out: list[Student] = []
            for class_id in class_ids:
                out.extend(s for s in self.list_local(class_id) if s.id == student_id)
            return out

        return self._by_owner(student_id, collect)

    def update_local(self, student_id: str, changes: Mapping[str, Any]) -> Optional[Student]:
        """Apply ``changes`` to every class copy of ``student_id``.

        ``class_id`` is not editable here; moving a student between classes is
        a delete plus a create.
        """

        changes = {k: v for k, v in changes.items() if k != "class_id"}

        def apply(class_ids: list[str]) -> Optional[Student]:
            updated: Optional[Student] = None
            for class_id in class_ids:
                students = self.list_local(class_id)
                hit = False
                for i, s in enumerate(students):
                    if s.id == student_id:
                        students[i] = s.with_changes(changes)
                        updated = updated or students[i]
                        hit = True
                if hit:
                    self._save_class(class_id, students)
            return updated

        return self._by_owner(student_id, apply)

    def reassign_id(self, old_id: str, new_id: str) -> list[Student]:
        """Give every copy of ``old_id`` the local id ``new_id``, attendance included."""

        def move(class_ids: list[str]) -> list[Student]:
            moved: list[Student] = []
            for class_id in class_ids:
                students = self.list_local(class_id)
                hit = False
                for i, s in enumerate(students):
                    if s.id == old_id:
                        students[i] = s.with_ref(LocalRef(new_id))
                        moved.append(students[i])
                        hit = True
                if hit:
                    self._save_class(class_id, students)
                    self._index_remove(old_id, class_id)
                    self._index_add(new_id, class_id)
            return moved

        moved = self._by_owner(old_id, move)
        if moved and self._attendance is not None:
            self._attendance.reassign_student(old_id, new_id)
        return moved

    def delete_local(self, student_id: str) -> bool:
        def remove(class_ids: list[str]) -> bool:
            deleted = False
            for class_id in class_ids:
                students = self.list_local(class_id)
                kept = [s for s in students if s.id != student_id]
                if len(kept) != len(students):
                    self._save_class(class_id, kept)
                    deleted = True
                self._index_remove(student_id, class_id)
            return deleted

        deleted = self._by_owner(student_id, remove)
        if deleted and self._attendance is not None:
            self._attendance.remove_student(student_id)
        return deleted

    def clear_class(self, class_id: str) -> None:
        for s in self.list_local(class_id):
            self._index_remove(s.id, class_id)
        self._save_class(class_id, [])

    def drop_class(self, class_id: str) -> None:
        for s in self.list_local(class_id):
            self._index_remove(s.id, class_id)
        self._store.delete(students_key(class_id))
        if self._attendance is not None:
            self._attendance.drop_class(class_id)
