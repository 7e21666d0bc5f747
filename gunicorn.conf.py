# Gunicorn configuration for production
# Usage: gunicorn -c gunicorn.conf.py iamsafe.api.main:app

import multiprocessing
import os

# Bind to all interfaces on port 8080
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")

# Rule of thumb: (2 * CPU cores) + 1
default_workers = multiprocessing.cpu_count() * 2 + 1
workers = int(
    os.getenv("GUNICORN_WORKERS", os.getenv("WEB_CONCURRENCY", default_workers))
)

# Uvicorn workers keep the FastAPI app async
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds)
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", 1000))
max_requests_jitter = int(os.getenv("GUNICORN_MAX_REQUESTS_JITTER", 50))

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")  # stdout
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")  # stderr
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Query strings are left out of the access log: admin deep links carry the token there
access_log_format = '{"time": "%(t)s", "status": %(s)s, "method": "%(m)s", "path": "%(U)s", "duration_ms": %(D)s, "size": %(B)s, "remote_addr": "%(h)s", "user_agent": "%(a)s"}'

preload_app = True

proc_name = "iamsafe"
