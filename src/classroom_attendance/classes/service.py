from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..students.local_repository import LocalStudentCache
from .model import ClassRoom
from .repository import ClassRepository

logger = logging.getLogger(__name__)


class ClassService:
    """Classes live in the remote store only; there is no local fallback."""

    def __init__(self, classes: ClassRepository, local: LocalStudentCache):
        self._classes = classes
        self._local = local

    def list_classes(self, user_id: str) -> Sequence[ClassRoom]:
        return self._classes.list_for_user(require_non_empty(user_id, "User"))

    def get_class(self, class_id: str) -> Optional[ClassRoom]:
        return self._classes.get_by_id(class_id)

    def create_class(self, *, name: str, description: str = "", schedule: str = "", user_id: str) -> ClassRoom:
        return self._classes.create(
            name=require_non_empty(name, "Class name"),
            description=(description or "").strip(),
            schedule=(schedule or "").strip(),
            user_id=require_non_empty(user_id, "User"),
        )

    def update_class(self, class_id: str, changes: Mapping[str, Any]) -> ClassRoom:
        cleaned: dict[str, str] = {}
        if changes.get("name") is not None:
            cleaned["name"] = require_non_empty(changes["name"], "Class name")
        for key in ("description", "schedule"):
            if changes.get(key) is not None:
                cleaned[key] = str(changes[key]).strip()
        if not cleaned:
            raise ValidationError("Nothing to update")
        return self._classes.update(class_id, cleaned)

    def delete_class(self, class_id: str) -> bool:
        """Delete remotely (students and attendance cascade), then drop the local cache."""

        deleted = self._classes.delete(class_id)
        self._local.drop_class(class_id)
        logger.info("Deleted class %s (remote=%s)", class_id, deleted)
        return deleted
