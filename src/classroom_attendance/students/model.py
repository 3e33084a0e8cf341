from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from ..core.ids import StudentRef, student_ref


@dataclass(frozen=True)
class StudentDraft:
    """Input for creating a student (no id yet)."""

    first_name: str
    last_name: str
    email: str
    class_id: str


@dataclass(frozen=True)
class Student:
    """Domain entity: one roster entry of a class.

    The ref decides which store owns the record. A record moves from the local
    cache to the remote store only by being recreated under a new id.
    """

    ref: StudentRef
    first_name: str
    last_name: str
    email: str
    class_id: str

    @property
    def id(self) -> str:
        return self.ref.id

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def in_class(self, class_id: str) -> "Student":
        return replace(self, class_id=class_id)

    def with_ref(self, ref: StudentRef) -> "Student":
        return replace(self, ref=ref)

    def with_changes(self, changes: Mapping[str, Any]) -> "Student":
        # Empty values never overwrite existing fields.
        fields = {k: v for k, v in changes.items() if k in _EDITABLE and v}
        return replace(self, **fields) if fields else self

    def to_dict(self) -> dict:
        """JSON form used by the local cache and the HTTP layer."""

        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "classId": self.class_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            ref=student_ref(str(data["id"])),
            first_name=str(data.get("firstName") or ""),
            last_name=str(data.get("lastName") or ""),
            email=str(data.get("email") or ""),
            class_id=str(data.get("classId") or ""),
        )


_EDITABLE = {"first_name", "last_name", "email", "class_id"}
