import os
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from slowapi.errors import RateLimitExceeded

from iamsafe.core.config import settings
from iamsafe.core.db import ensure_db, is_postgres_mode
from iamsafe.api.routers import board, system
from iamsafe.api.middleware.rate_limiter import limiter, rate_limit_exceeded_handler
from iamsafe.api.middleware.request_logging import RequestLoggingMiddleware
from iamsafe.api.metrics import router as metrics_router, MetricsMiddleware
from iamsafe.api.templates import TEMPLATE_DIR


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        # Inline styles and the delete confirm() handler live in the page
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:;"
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- DB Initialization ---
    if not is_postgres_mode():
        db_dir = os.path.dirname(settings.DB_PATH)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    ensure_db(settings.DB_PATH)
    yield


app = FastAPI(
    lifespan=lifespan,
    title="I Am Safe",
    version="0.1.0",
    description="Emergency status board: post, browse and search check-ins.",
    openapi_tags=[
        {"name": "board", "description": "Status board pages and forms"},
        {"name": "system", "description": "Health checks"},
        {"name": "metrics", "description": "Prometheus metrics"},
    ],
)

# --- Rate Limiter ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# --- Middleware (order matters: last added = first executed) ---
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(MetricsMiddleware)

# Trusted Hosts (prevent Host header attacks)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# --- CORS ---
if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


@app.exception_handler(500)
async def server_error_handler(request: Request, exc: Exception):
    """Custom 500 page."""
    template_path = os.path.join(TEMPLATE_DIR, "error", "500.html")
    if os.path.exists(template_path):
        with open(template_path, "r", encoding="utf-8") as f:
            return HTMLResponse(content=f.read(), status_code=500)
    return HTMLResponse(content="<h1>500 - Server Error</h1>", status_code=500)


# Include Routers
# The board router owns the catch-all route, so it goes last
app.include_router(system.router, tags=["system"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(board.router, tags=["board"])


if __name__ == "__main__":
    uvicorn.run(
        "iamsafe.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
