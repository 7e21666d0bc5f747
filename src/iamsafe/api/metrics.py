# Prometheus Metrics for FastAPI
# Provides /metrics endpoint for scraping

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from fastapi import APIRouter, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import time

router = APIRouter()

# --- Metrics Definitions ---

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status"]
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

ACTIVE_REQUESTS = Gauge("http_requests_active", "Number of active HTTP requests")

# Board-specific metrics
SUBMISSION_COUNT = Counter(
    "status_submissions_total",
    "Status submissions by outcome",
    ["result"],  # "created", "invalid", "error"
)

DELETION_COUNT = Counter(
    "status_deletions_total",
    "Admin delete attempts by outcome",
    ["result"],  # "deleted", "noop", "unauthorized", "invalid", "error"
)

LISTING_LATENCY = Histogram(
    "board_listing_duration_seconds",
    "Board listing latency",
    ["mode"],  # "browse" or "search"
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Paths served by real routes; anything else falls through to the board
KNOWN_PATHS = {"/", "/update", "/delete", "/admin/logout"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect request metrics."""

    async def dispatch(self, request: Request, call_next):
        # Skip metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        ACTIVE_REQUESTS.inc()
        start_time = time.time()

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            path = self._normalize_path(request.url.path)

            REQUEST_COUNT.labels(
                method=request.method, path=path, status=response.status_code
            ).inc()

            REQUEST_LATENCY.labels(method=request.method, path=path).observe(duration)

            return response
        finally:
            ACTIVE_REQUESTS.dec()

    def _normalize_path(self, path: str) -> str:
        """Normalize path to reduce cardinality."""
        if path in KNOWN_PATHS or path.startswith("/health"):
            return path
        return "/*"


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_submission(result: str):
    SUBMISSION_COUNT.labels(result=result).inc()


def record_deletion(result: str):
    DELETION_COUNT.labels(result=result).inc()


def record_listing(mode: str, duration: float):
    LISTING_LATENCY.labels(mode=mode).observe(duration)
