from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Student, StudentDraft


class StudentRepository(Protocol):
    """Remote store interface for students.

    Implementations raise ``RemoteError`` on transport/validation failures,
    including uniqueness violations (same email twice in a class). No retries.
    """

    def list_by_class(self, class_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def find_in_class_by_email(self, class_id: str, email: str) -> Optional[Student]:
        raise NotImplementedError

    def find_in_class_by_name(self, class_id: str, first_name: str, last_name: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, draft: StudentDraft) -> Student:
        raise NotImplementedError

    def update(self, student_id: str, changes: Mapping[str, Any]) -> Student:
        """Raises ``NotFoundError`` when the student does not exist."""

        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError
