"""Duplicate-identity detection between the remote store and the local cache.

Two records are taken to be the same real-world student when their
IdentityKey matches: the email when one is set, otherwise the
(first name, last name) pair. This is a heuristic, not a merge: when a
duplicate is found one copy is kept whole and the other is dropped.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence, Tuple

from ..students.local_repository import LocalStudentCache
from ..students.model import Student

logger = logging.getLogger(__name__)

IdentityKey = Tuple[str, ...]


def normalize_email(email: str) -> str:
    return (email or "").strip().casefold()


def normalize_name(first_name: str, last_name: str) -> tuple[str, str]:
    return (first_name or "").strip(), (last_name or "").strip()


def identity_key(student: Student) -> IdentityKey:
    email = normalize_email(student.email)
    if email:
        return ("email", email)
    return ("name", *normalize_name(student.first_name, student.last_name))


def matches(candidate: Student, existing: Student) -> bool:
    """Does ``candidate`` denote the same student as ``existing``?

    A candidate with an email matches on email only; one without matches on
    name only. The name is never consulted as a second chance for a
    candidate that has an email.
    """

    email = normalize_email(candidate.email)
    if email:
        return email == normalize_email(existing.email)
    return normalize_name(candidate.first_name, candidate.last_name) == normalize_name(existing.first_name, existing.last_name)


def merge_student_lists(remote: Sequence[Student], local: Sequence[Student]) -> list[Student]:
    """Remote entries unchanged, followed by local entries nobody else claims.

    O(len(remote) * len(local)), fine for classroom-sized rosters.
    """

    merged = list(remote)
    for candidate in local:
        if any(matches(candidate, kept) for kept in merged):
            continue
        merged.append(candidate)
    return merged


def find_duplicates(students: Iterable[Student]) -> list[list[Student]]:
    """Groups (size >= 2) of students sharing an identity key, in first-seen order."""

    groups: dict[IdentityKey, list[Student]] = {}
    for s in students:
        groups.setdefault(identity_key(s), []).append(s)
    return [g for g in groups.values() if len(g) > 1]


class IdentityReconciler:
    def __init__(self, local: LocalStudentCache):
        self._local = local

    find_duplicates = staticmethod(find_duplicates)

    def reconcile(self, class_id: str, remote: Sequence[Student]) -> list[Student]:
        local = self._local.list_local(class_id)
        merged = merge_student_lists(remote, local)
        shadowed = len(remote) + len(local) - len(merged)
        if shadowed:
            logger.info("Class %s: %d local student(s) shadowed by existing records", class_id, shadowed)
        return merged

    def local_duplicates(self) -> list[list[Student]]:
        """Duplicate identities inside each class's local cache."""

        out: list[list[Student]] = []
        for class_id in self._local.class_ids():
            out.extend(find_duplicates(self._local.list_local(class_id)))
        return out
