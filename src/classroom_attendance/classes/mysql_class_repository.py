from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassRoom
from .repository import ClassRepository

_COLUMNS = "id, name, description, schedule, user_id, created_at"
_UPDATABLE = {"name": "name", "description": "description", "schedule": "schedule"}


def _to_class(r: dict) -> ClassRoom:
    return ClassRoom(
        class_id=str(r["id"]),
        name=r["name"],
        description=r.get("description") or "",
        schedule=r.get("schedule") or "",
        user_id=str(r["user_id"]),
        created_at=r.get("created_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM classes WHERE user_id=%s ORDER BY created_at DESC",
                (str(user_id),),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes ORDER BY created_at ASC")
            return [_to_class(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: str) -> Optional[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE id=%s", (str(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def create(self, *, name: str, description: str, schedule: str, user_id: str) -> ClassRoom:
        class_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(id, name, description, schedule, user_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (class_id, name, description, schedule, str(user_id)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE id=%s", (class_id,))
            return _to_class(fetchone(cur))

    def update(self, class_id: str, changes: Mapping[str, Any]) -> ClassRoom:
        sets = [f"{col}=%s" for key, col in _UPDATABLE.items() if key in changes]
        params: list[object] = [changes[key] for key in _UPDATABLE if key in changes]

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(f"UPDATE classes SET {', '.join(sets)} WHERE id=%s", (*params, str(class_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE id=%s", (str(class_id),))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Class {class_id} not found")
            return _to_class(r)

    def delete(self, class_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE id=%s", (str(class_id),))
            return cur.rowcount > 0
