from __future__ import annotations

import mysql.connector
import pytest

from classroom_attendance.core.exceptions import RemoteError
from classroom_attendance.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self):
        self.cur = FakeCursor()
        self.committed = self.rolled_back = self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConn()

    def connect(self):
        return self.conn


def test_commits_on_success():
    factory = FakeFactory()
    with db_cursor(factory) as (conn, cur):
        assert cur is factory.conn.cur

    assert factory.conn.committed and factory.conn.closed and factory.conn.cur.closed
    assert not factory.conn.rolled_back


def test_driver_error_becomes_remote_error_with_errno():
    factory = FakeFactory()

    with pytest.raises(RemoteError) as info:
        with db_cursor(factory):
            raise mysql.connector.Error(msg="a foreign key constraint fails", errno=1452)

    assert info.value.is_foreign_key_violation
    assert factory.conn.rolled_back and factory.conn.closed
    assert not factory.conn.committed


def test_other_errors_roll_back_and_propagate():
    factory = FakeFactory()

    with pytest.raises(KeyError):
        with db_cursor(factory):
            raise KeyError("x")

    assert factory.conn.rolled_back and factory.conn.closed
