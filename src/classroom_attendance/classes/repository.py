from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import ClassRoom


class ClassRepository(Protocol):
    """Remote store interface for classes.

    Note (DIP): services depend on this interface, not on a concrete database.
    Implementations raise ``RemoteError`` on transport/validation failures.
    """

    def list_for_user(self, user_id: str) -> Sequence[ClassRoom]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ClassRoom]:
        raise NotImplementedError

    def get_by_id(self, class_id: str) -> Optional[ClassRoom]:
        raise NotImplementedError

    def create(self, *, name: str, description: str, schedule: str, user_id: str) -> ClassRoom:
        raise NotImplementedError

    def update(self, class_id: str, changes: Mapping[str, Any]) -> ClassRoom:
        """Raises ``NotFoundError`` when the class does not exist."""

        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        raise NotImplementedError
