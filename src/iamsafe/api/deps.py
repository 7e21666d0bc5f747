"""
API Dependencies

Dependency injection for FastAPI routes.
"""

from iamsafe.core.config import settings
from iamsafe.services.admin_auth import AdminGuard
from iamsafe.services.board import StatusBoardService

# Lazy-initialized instances
_board_service: StatusBoardService | None = None
_admin_guard: AdminGuard | None = None


def get_board_service() -> StatusBoardService:
    """Get or create the status board service."""
    global _board_service
    if _board_service is None:
        _board_service = StatusBoardService(
            settings.DB_PATH,
            page_size=settings.PAGE_SIZE,
            max_query_len=settings.MAX_QUERY_LEN,
        )
    return _board_service


def get_admin_guard() -> AdminGuard:
    """Get or create the admin guard."""
    global _admin_guard
    if _admin_guard is None:
        _admin_guard = AdminGuard(settings.ADMIN_TOKEN, settings.SECRET_KEY)
    return _admin_guard
