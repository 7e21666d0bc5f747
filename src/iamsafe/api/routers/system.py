"""
System Router

Health check endpoints:
- /health: Simple health for load balancers
- /health/live: Liveness probe (process alive)
- /health/ready: Readiness probe (database reachable)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from iamsafe.api.deps import get_board_service
from iamsafe.services.board import StatusBoardService
from iamsafe.services.db_helpers import db_cursor

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_database(db_path: str) -> bool:
    """Check that the status table can be queried."""
    try:
        with db_cursor(db_path) as (_, cursor):
            cursor.execute("SELECT 1 FROM safety_checks LIMIT 1")
            cursor.fetchall()
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False


@router.get("/health")
async def health():
    """Simple health check for load balancers."""
    return {"status": "ok"}


@router.get("/health/live")
async def liveness():
    """Liveness probe - is the process running?"""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(service: StatusBoardService = Depends(get_board_service)):
    """Readiness probe - can we reach the database?"""
    database_ok = await run_in_threadpool(_check_database, service.db_path)
    checks = {"database": "ok" if database_ok else "unhealthy"}
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={"status": "ok" if database_ok else "unhealthy", "checks": checks},
    )
