from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def read_json_list(store: KeyValueStore, key: str) -> list[dict[str, Any]]:
    """Load the JSON array stored under ``key``; unreadable data counts as empty."""

    raw = store.get(key)
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.error("Unparseable local cache entry under %s; treating as empty", key)
        return []
    if not isinstance(data, list):
        logger.error("Local cache entry under %s is not a list; treating as empty", key)
        return []
    return [item for item in data if isinstance(item, dict)]


def write_json_list(store: KeyValueStore, key: str, items: Iterable[dict[str, Any]]) -> None:
    store.set(key, json.dumps(list(items), ensure_ascii=False))
