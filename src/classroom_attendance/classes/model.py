from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ClassRoom:
    """Domain entity: a class taught by one teacher (``user_id``)."""

    class_id: str
    name: str
    description: str
    schedule: str
    user_id: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "description": self.description,
            "schedule": self.schedule,
            "userId": self.user_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
