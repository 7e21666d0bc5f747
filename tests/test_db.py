"""Test database setup and connection helpers."""

import os
import sqlite3

import pytest

from iamsafe.core.db import ensure_db, open_db, sql_placeholder, is_postgres_mode
from iamsafe.services.db_helpers import db_cursor


class TestDatabaseInitialization:
    def test_ensure_db_creates_file(self, tmp_path):
        db_path = str(tmp_path / "fresh.db")
        ensure_db(db_path)
        assert os.path.exists(db_path)

    def test_ensure_db_creates_table_and_index(self, test_db_path):
        conn = sqlite3.connect(test_db_path)
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        indexes = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
        }
        columns = [row[1] for row in conn.execute("PRAGMA table_info(safety_checks)")]
        conn.close()

        assert "safety_checks" in tables
        assert "idx_safety_checks_created" in indexes
        assert columns == [
            "id",
            "name",
            "id_number",
            "location",
            "status",
            "message",
            "ip_address",
            "created_at",
        ]

    def test_ensure_db_is_repeatable(self, test_db_path):
        ensure_db(test_db_path)
        ensure_db(test_db_path)

    def test_open_db_returns_connection(self, test_db_path):
        conn = open_db(test_db_path)
        assert isinstance(conn, sqlite3.Connection)
        conn.close()

    def test_store_assigns_id_and_timestamp(self, test_db_path):
        conn = open_db(test_db_path)
        cur = conn.execute(
            "INSERT INTO safety_checks (name, status) VALUES (?, ?)", ("Chan", "Safe")
        )
        conn.commit()
        row = conn.execute(
            "SELECT id, created_at FROM safety_checks WHERE id = ?", (cur.lastrowid,)
        ).fetchone()
        conn.close()

        assert row[0] == cur.lastrowid
        assert row[1] is not None


class TestDialect:
    def test_sqlite_placeholder(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert is_postgres_mode() is False
        assert sql_placeholder() == "?"

    def test_postgres_placeholder(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/iamsafe")
        assert is_postgres_mode() is True
        assert sql_placeholder() == "%s"

    def test_postgres_timestamps_carry_time_zone(self):
        from iamsafe.core.db import SCHEMA_SQL

        assert "created_at TIMESTAMPTZ" in SCHEMA_SQL

    def test_production_requires_database_url(self, monkeypatch):
        from iamsafe.core.db import get_connection
        from iamsafe.core.infrastructure_config import Environment

        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setattr(
            "iamsafe.core.db.settings.ENVIRONMENT", Environment.PRODUCTION
        )
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_connection("/tmp/unused.db")


class _FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class _FakeConnection:
    def __init__(self):
        self.cursor_obj = _FakeCursor()
        self.closed = False

    def cursor(self):
        return self.cursor_obj

    def close(self):
        self.closed = True


def test_db_cursor_closes_resources_on_success(monkeypatch):
    conn = _FakeConnection()

    monkeypatch.setattr("iamsafe.services.db_helpers.get_connection", lambda _: conn)

    with db_cursor("/tmp/test.db") as (current_conn, cursor):
        assert current_conn is conn
        assert cursor is conn.cursor_obj

    assert conn.cursor_obj.closed is True
    assert conn.closed is True


def test_db_cursor_closes_resources_on_exception(monkeypatch):
    conn = _FakeConnection()

    monkeypatch.setattr("iamsafe.services.db_helpers.get_connection", lambda _: conn)

    with pytest.raises(RuntimeError):
        with db_cursor("/tmp/test.db"):
            raise RuntimeError("boom")

    assert conn.cursor_obj.closed is True
    assert conn.closed is True
