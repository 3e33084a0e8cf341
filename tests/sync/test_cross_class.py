from __future__ import annotations

import sqlite3

import pytest

from classroom_attendance.cache.kv_store import InMemoryKeyValueStore
from classroom_attendance.core.constants import STANDARD_ROSTER
from classroom_attendance.core.exceptions import LocalFallbackUsed
from classroom_attendance.core.ids import LocalRef
from classroom_attendance.students.local_repository import LocalStudentCache
from classroom_attendance.students.model import Student
from classroom_attendance.sync.cross_class import CrossClassSync


def seed_class(container, class_id, *students):
    # An empty list still registers the class in the local cache.
    container.local_students.clear_class(class_id)
    for s in students:
        container.local_students.save_local(s)


def test_offline_create_is_propagated_to_other_classes(container, students_repo):
    seed_class(container, "A")
    seed_class(container, "B")
    students_repo.offline = True

    with pytest.warns(LocalFallbackUsed):
        created = container.student_service.create_student(
            first_name="Aarav", last_name="Sharma", email="aarav.sharma@niet.ac.in", class_id="A"
        )

    assert created.ref.is_local
    assert container.local_students.list_local("A") == [created]

    copies = container.local_students.list_local("B")
    assert len(copies) == 1
    copy = copies[0]
    assert (copy.first_name, copy.last_name, copy.email) == ("Aarav", "Sharma", "aarav.sharma@niet.ac.in")
    assert copy.class_id == "B"
    assert copy.ref.is_local


def test_propagate_is_idempotent(container):
    seed_class(container, "A")
    seed_class(container, "B")
    seed_class(container, "C")
    s = Student(ref=LocalRef("local-1-abc"), first_name="Priya", last_name="Patel", email="priya@niet.ac.in", class_id="A")

    assert container.cross_class_sync.propagate(s) == 2
    container.cross_class_sync.propagate(s)

    for class_id in ("B", "C"):
        matching = [x for x in container.local_students.list_local(class_id) if x.email == "priya@niet.ac.in"]
        assert len(matching) == 1
    assert container.local_students.list_local("A") == []


def test_propagate_overwrites_match_and_keeps_its_id(container):
    existing = Student(ref=LocalRef("local-old"), first_name="Rahul", last_name="Kumar", email="", class_id="B")
    seed_class(container, "B", existing)
    incoming = Student(
        ref=LocalRef("local-new"), first_name="Rahul", last_name="Kumar", email="rahul@niet.ac.in", class_id="A"
    )

    container.cross_class_sync.propagate(incoming)

    [updated] = container.local_students.list_local("B")
    assert updated.id == "local-old"
    assert updated.email == "rahul@niet.ac.in"


def test_replace_roster_discards_previous_contents(container, students_repo):
    old = Student(ref=LocalRef("local-old"), first_name="Old", last_name="Student", email="old@x.org", class_id="A")
    seed_class(container, "A", old)

    roster = container.roster_standardizer.replace_roster("A")

    cached = container.local_students.list_local("A")
    assert len(roster) == 9
    assert len(cached) == 9
    assert sorted((s.first_name, s.last_name, s.email) for s in cached) == sorted(STANDARD_ROSTER)
    assert all(s.class_id == "A" for s in cached)
    assert container.local_students.find_local_by_id("local-old") is None


def test_replace_roster_offline_and_repeated(container, students_repo):
    seed_class(container, "A")
    seed_class(container, "B")
    students_repo.offline = True

    with pytest.warns(LocalFallbackUsed):
        container.roster_standardizer.replace_roster("A")
        container.roster_standardizer.replace_roster("A")

    assert len(container.local_students.list_local("A")) == 9
    assert all(s.ref.is_local for s in container.local_students.list_local("A"))
    # Propagation reached B without duplicating anyone.
    assert len(container.local_students.list_local("B")) == 9


def test_replace_roster_twice_online_reuses_remote_students(container, students_repo):
    container.roster_standardizer.replace_roster("A")
    again = container.roster_standardizer.replace_roster("A")

    assert len(students_repo.rows) == 9
    assert {s.id for s in again} == set(students_repo.rows)
    assert len(container.local_students.list_local("A")) == 9


def test_standardize_all_classes(container, classes_repo):
    a = container.class_service.create_class(name="Math", user_id="t1")
    b = container.class_service.create_class(name="Physics", user_id="t1")

    assert container.roster_standardizer.standardize_all_classes() is True
    assert len(container.local_students.list_local(a.class_id)) == 9
    assert len(container.local_students.list_local(b.class_id)) == 9


def test_standardize_all_classes_reports_failure(container, classes_repo):
    classes_repo.offline = True
    assert container.roster_standardizer.standardize_all_classes() is False


class ReadOnlyKeyStore(InMemoryKeyValueStore):
    def __init__(self, locked_key, initial):
        super().__init__(initial)
        self.locked_key = locked_key

    def set(self, key, value):
        if key == self.locked_key:
            raise sqlite3.OperationalError("attempt to write a readonly database")
        super().set(key, value)


def test_propagate_continues_past_a_failing_class():
    store = ReadOnlyKeyStore("local_students_B", {"local_students_B": "[]", "local_students_C": "[]"})
    sync = CrossClassSync(LocalStudentCache(store))
    student = Student(ref=LocalRef("local-1"), first_name="Aarav", last_name="Sharma", email="", class_id="A")

    assert sync.propagate(student) == 1
    assert [s.class_id for s in LocalStudentCache(store).list_local("C")] == ["C"]
