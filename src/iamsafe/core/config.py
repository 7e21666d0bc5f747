"""
Application Configuration

Board-specific settings layered on top of the infrastructure settings.
Values are read from the environment once, at import time.
"""

import os

from iamsafe.core.infrastructure_config import Environment, InfrastructureSettings
from iamsafe.i18n.messages import DEFAULT_LANG, EVENT


class Settings(InfrastructureSettings):
    """Status board configuration"""

    # Admin Authentication (required - no defaults for security)
    ADMIN_TOKEN: str | None = os.getenv("ADMIN_TOKEN")
    SECRET_KEY: str | None = os.getenv("ADMIN_SESSION_SECRET")

    # Board
    DEFAULT_LANG: str = os.getenv("DEFAULT_LANG", DEFAULT_LANG)
    EVENT_NAME: str = os.getenv("EVENT_NAME", EVENT)
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "20"))
    MAX_QUERY_LEN: int = int(os.getenv("MAX_QUERY_LEN", "200"))
    SUBMIT_RATE_LIMIT: str = os.getenv("SUBMIT_RATE_LIMIT", "20/minute")

    # Security
    ALLOWED_HOSTS: list[str] = os.getenv(
        "ALLOWED_HOSTS", "localhost,127.0.0.1,testclient,testserver"
    ).split(",")
    CORS_ORIGINS: list[str] = (
        os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []
    )

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"


settings = Settings()


def _validate_required(settings: Settings) -> None:
    """Validate required settings outside of tests."""
    if settings.ENVIRONMENT == Environment.TEST:
        return

    required_fields = [
        "ADMIN_TOKEN",
        "SECRET_KEY",
    ]
    missing = [name for name in required_fields if not getattr(settings, name)]
    if missing:
        raise RuntimeError(
            "Missing required environment variables: " + ", ".join(missing)
        )


_validate_required(settings)
