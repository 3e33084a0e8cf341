"""Student references.

A student id is classified once, where it enters the system, into a
``RemoteRef`` (owned by the remote store) or a ``LocalRef`` (placeholder owned by
the local cache). Call sites carry the ref instead of re-checking the string.
"""
from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass
from typing import Union

from .constants import LOCAL_ID_MARKERS, LOCAL_ID_PREFIX, REMOTE_ID_PATTERN

_REMOTE_ID_RE = re.compile(REMOTE_ID_PATTERN)


@dataclass(frozen=True)
class RemoteRef:
    id: str

    @property
    def is_local(self) -> bool:
        return False


@dataclass(frozen=True)
class LocalRef:
    id: str

    @property
    def is_local(self) -> bool:
        return True


StudentRef = Union[RemoteRef, LocalRef]


def is_local_id(value: str) -> bool:
    if any(marker in value for marker in LOCAL_ID_MARKERS):
        return True
    return _REMOTE_ID_RE.match(value) is None


def student_ref(value: str) -> StudentRef:
    value = str(value).strip()
    return LocalRef(value) if is_local_id(value) else RemoteRef(value)


def as_ref(value: "StudentRef | str") -> StudentRef:
    if isinstance(value, (RemoteRef, LocalRef)):
        return value
    return student_ref(value)


def new_local_id() -> str:
    # e.g. local-1718000000000-a1b2c3
    return f"{LOCAL_ID_PREFIX}{int(time.time() * 1000)}-{secrets.token_hex(3)}"
