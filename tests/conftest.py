"""Pytest configuration for the status board tests."""

import os
import sys
from pathlib import Path

# Set ENVIRONMENT before importing any modules that read settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("ADMIN_SESSION_SECRET", "test-session-secret")

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from iamsafe.core.db import ensure_db  # noqa: E402

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]


@pytest.fixture
def test_db_path(tmp_path):
    """Provide a temporary database path with the schema in place."""
    db_path = str(tmp_path / "test_iamsafe.db")
    ensure_db(db_path)
    return db_path


@pytest.fixture
def board_service(test_db_path):
    from iamsafe.services.board import StatusBoardService

    return StatusBoardService(test_db_path, page_size=20)


@pytest.fixture
def admin_guard():
    from iamsafe.services.admin_auth import AdminGuard

    return AdminGuard(ADMIN_TOKEN, "test-session-secret")


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    from iamsafe.api.middleware.rate_limiter import limiter

    limiter.reset()
    yield


@pytest.fixture
def client(board_service, admin_guard):
    """FastAPI test client wired to a temporary database."""
    from iamsafe.api.main import app
    from iamsafe.api.deps import get_admin_guard, get_board_service

    app.dependency_overrides[get_board_service] = lambda: board_service
    app.dependency_overrides[get_admin_guard] = lambda: admin_guard
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_record(board_service):
    """Insert a record directly through the service and return its id."""

    def _add(name="Chan Tai Man", status="Safe", location="Shelter#3", **kwargs):
        return board_service.submit(
            name=name, status=status, location=location, ip_address="127.0.0.1", **kwargs
        )

    return _add
