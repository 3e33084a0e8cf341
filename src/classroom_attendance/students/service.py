from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.fallback import signal_local_fallback
from ..common.validators import optional_email, require_non_empty
from ..core.exceptions import NotFoundError, RemoteError, ValidationError
from ..core.ids import LocalRef, StudentRef, as_ref, new_local_id
from ..sync.cross_class import CrossClassSync
from ..sync.reconciler import IdentityReconciler
from .local_repository import LocalStudentCache
from .model import Student, StudentDraft
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Student use cases over the remote store with the local cache as fallback."""

    def __init__(
        self,
        students: StudentRepository,
        local: LocalStudentCache,
        *,
        reconciler: Optional[IdentityReconciler] = None,
        sync: Optional[CrossClassSync] = None,
    ):
        self._students = students
        self._local = local
        self._reconciler = reconciler or IdentityReconciler(local)
        self._sync = sync or CrossClassSync(local)

    def list_students(self, class_id: str) -> list[Student]:
        try:
            remote = list(self._students.list_by_class(class_id))
        except RemoteError as e:
            signal_local_fallback(f"Could not load students of class {class_id} ({e}); using local cache only")
            remote = []
        return self._reconciler.reconcile(class_id, remote)

    def get_student(self, student: "StudentRef | str") -> Optional[Student]:
        ref = as_ref(student)
        if ref.is_local:
            return self._local.find_local_by_id(ref.id)

        try:
            found = self._students.get_by_id(ref.id)
        except RemoteError as e:
            signal_local_fallback(f"Could not load student {ref.id} ({e}); using local cache only")
            found = None
        return found or self._local.find_local_by_id(ref.id)

    def create_student(self, *, first_name: str, last_name: str, email: str = "", class_id: str) -> Student:
        """Create remotely; on failure keep the student locally under a placeholder id.

        Callers must adopt the id of the returned student.
        """

        draft = StudentDraft(
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            email=optional_email(email),
            class_id=require_non_empty(class_id, "Class"),
        )

        try:
            return self._students.create(draft)
        except RemoteError as e:
            if e.is_unique_violation:
                existing = self._find_existing_remote(draft)
                if existing is not None:
                    logger.warning("Student %s already exists in class %s", existing.full_name, draft.class_id)
                    return existing
            reason = str(e)

        student = Student(
            ref=LocalRef(new_local_id()),
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=draft.email,
            class_id=draft.class_id,
        )
        self._local.save_local(student)
        signal_local_fallback(f"Student {student.full_name} saved locally as {student.id} ({reason})")
        self._sync.propagate(student)
        return student

    def _find_existing_remote(self, draft: StudentDraft) -> Optional[Student]:
        try:
            if draft.email:
                found = self._students.find_in_class_by_email(draft.class_id, draft.email)
                if found is not None:
                    return found
            return self._students.find_in_class_by_name(draft.class_id, draft.first_name, draft.last_name)
        except RemoteError:
            logger.exception("Lookup of existing student %s %s failed", draft.first_name, draft.last_name)
            return None

    def update_student(self, student: "StudentRef | str", changes: Mapping[str, Any]) -> Student:
        ref = as_ref(student)
        changes = self._clean_changes(changes)

        if ref.is_local:
            updated = self._local.update_local(ref.id, changes)
            if updated is None:
                raise NotFoundError(f"Student {ref.id} not found")
            self._sync.propagate(updated)
            return updated

        updated = self._students.update(ref.id, changes)
        # Refresh cached copies carrying the remote id.
        self._local.update_local(ref.id, changes)
        return updated

    def delete_student(self, student: "StudentRef | str") -> bool:
        ref = as_ref(student)
        if ref.is_local:
            return self._local.delete_local(ref.id)

        deleted = self._students.delete(ref.id)
        dropped = self._local.delete_local(ref.id)
        return deleted or dropped

    @staticmethod
    def _clean_changes(changes: Mapping[str, Any]) -> dict[str, str]:
        out: dict[str, str] = {}
        for key in ("first_name", "last_name"):
            if key in changes and changes[key] is not None:
                out[key] = require_non_empty(changes[key], key.replace("_", " ").capitalize())
        if "email" in changes and changes["email"] is not None:
            out["email"] = optional_email(changes["email"])
        if not out:
            raise ValidationError("Nothing to update")
        return out
