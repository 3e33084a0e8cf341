"""Keeps one student looking the same in every class's local cache.

Propagation is last-writer-wins with no timestamps and no atomicity: if it
stops half way, some classes carry the new values and others the old ones,
and nothing resumes it. The next read reconciles what it can.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING, Optional

from ..classes.repository import ClassRepository
from ..core.constants import STANDARD_ROSTER
from ..core.exceptions import RemoteError
from ..students.local_repository import LocalStudentCache
from ..students.model import Student
from .reconciler import normalize_email, normalize_name

if TYPE_CHECKING:
    from ..students.service import StudentService

logger = logging.getLogger(__name__)


def _same_person(incoming: Student, existing: Student) -> bool:
    # Looser than the reconciler: name OR (non-empty) email.
    if normalize_name(incoming.first_name, incoming.last_name) == normalize_name(existing.first_name, existing.last_name):
        return True
    email = normalize_email(incoming.email)
    return bool(email) and email == normalize_email(existing.email)


class CrossClassSync:
    def __init__(self, local: LocalStudentCache):
        self._local = local

    def propagate(self, student: Student) -> int:
        """Copy or refresh ``student`` in every other class cache.

        Returns the number of classes written.
        """

        written = 0
        for class_id in self._local.class_ids():
            if class_id == student.class_id:
                continue
            try:
                self._propagate_to(class_id, student)
                written += 1
            except (sqlite3.Error, ValueError):
                logger.exception("Failed to sync %s to class %s", student.full_name, class_id)
        return written

    def _propagate_to(self, class_id: str, student: Student) -> None:
        existing: Optional[Student] = next(
            (s for s in self._local.list_local(class_id) if _same_person(student, s)),
            None,
        )
        if existing is None:
            self._local.save_local(student.in_class(class_id))
            logger.debug("Synced student %s to class %s", student.full_name, class_id)
            return

        self._local.save_local(
            Student(
                ref=existing.ref,
                first_name=student.first_name,
                last_name=student.last_name,
                email=student.email,
                class_id=existing.class_id,
            )
        )
        logger.debug("Updated student %s in class %s", student.full_name, class_id)


class RosterStandardizer:
    """Replaces class rosters with the fixed standard list."""

    def __init__(
        self,
        students: "StudentService",
        local: LocalStudentCache,
        sync: CrossClassSync,
        classes: ClassRepository,
    ):
        self._students = students
        self._local = local
        self._sync = sync
        self._classes = classes

    def replace_roster(self, class_id: str) -> list[Student]:
        """Destructive: the class cache ends up holding exactly the standard list."""

        self._local.clear_class(class_id)

        created: list[Student] = []
        for first_name, last_name, email in STANDARD_ROSTER:
            student = self._students.create_student(
                first_name=first_name,
                last_name=last_name,
                email=email,
                class_id=class_id,
            )
            self._local.save_local(student)
            self._sync.propagate(student)
            created.append(student)

        logger.info("Replaced roster of class %s with %d standard students", class_id, len(created))
        return created

    def standardize_all_classes(self) -> bool:
        try:
            classes = self._classes.list_all()
        except RemoteError:
            logger.exception("Could not list classes for roster standardization")
            return False

        if not classes:
            logger.info("No classes found to standardize")
            return True

        for c in classes:
            self.replace_roster(c.class_id)
        return True
