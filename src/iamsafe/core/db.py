"""
Database Module

Schema definitions and connection handling for the status board.

Supports both:
- PostgreSQL (production): Set DATABASE_URL environment variable
- Local SQLite (development): Uses IAMSAFE_DB path or default
"""

import os
from typing import Any

from iamsafe.core.config import settings
from iamsafe.core.infrastructure_config import Environment

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS safety_checks (
  id SERIAL PRIMARY KEY,
  name TEXT NOT NULL,
  id_number TEXT,
  location TEXT,
  status TEXT NOT NULL,
  message TEXT,
  ip_address TEXT,
  created_at TIMESTAMPTZ DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_safety_checks_created ON safety_checks(created_at);
"""

# SQLite schema for local development
SQLITE_SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS safety_checks (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  id_number TEXT,
  location TEXT,
  status TEXT NOT NULL,
  message TEXT,
  ip_address TEXT,
  created_at TEXT DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_safety_checks_created ON safety_checks(created_at);
"""


def is_postgres_mode() -> bool:
    """Check if we're using PostgreSQL."""
    return os.getenv("DATABASE_URL") is not None


def sql_placeholder() -> str:
    """Return parameter placeholder for current database driver."""
    return "%s" if is_postgres_mode() else "?"


def get_connection(db_path: str | None = None) -> Any:
    """Get database connection (PostgreSQL or local SQLite).

    Args:
        db_path: Optional path to SQLite database. Ignored if DATABASE_URL is set.

    Raises:
        RuntimeError: If ENVIRONMENT is 'production' but DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")

    if settings.ENVIRONMENT == Environment.PRODUCTION and not database_url:
        raise RuntimeError(
            "DATABASE_URL is required in production environment. "
            "Set DATABASE_URL environment variable."
        )

    if database_url:
        import psycopg2

        return psycopg2.connect(database_url)
    else:
        import sqlite3

        path = db_path or os.getenv("IAMSAFE_DB", settings.DB_PATH)
        return sqlite3.connect(path)


def _execute_schema_statements(con: Any, schema: str) -> None:
    """Execute schema statements one by one for PostgreSQL compatibility."""
    cur = con.cursor()
    statements = [s.strip() for s in schema.split(";") if s.strip()]
    # Serialize schema creation across gunicorn workers starting together
    lock_id = 471726330
    cur.execute("SELECT pg_advisory_lock(%s)", (lock_id,))
    try:
        for stmt in statements:
            cur.execute(stmt)
        con.commit()
    except Exception:
        con.rollback()
        raise
    finally:
        try:
            cur.execute("SELECT pg_advisory_unlock(%s)", (lock_id,))
            con.commit()
        finally:
            cur.close()


def open_db(path: str = settings.DB_PATH) -> Any:
    """Open database connection and ensure schema exists.

    Note: If DATABASE_URL is set, the path parameter is ignored
    and PostgreSQL connection is used instead.
    """
    con = get_connection(path)

    if is_postgres_mode():
        _execute_schema_statements(con, SCHEMA_SQL)
    else:
        con.executescript(SQLITE_SCHEMA_SQL)

    return con


def ensure_db(path: str = settings.DB_PATH) -> None:
    """Ensure database file exists with correct schema."""
    con = open_db(path)
    con.close()
