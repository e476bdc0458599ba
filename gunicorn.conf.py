"""
Gunicorn configuration for the job board API
Run with: gunicorn jobboard.main:app -c gunicorn.conf.py
"""
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
# Each worker owns its own async engine and connection pool
# (DATABASE_POOL_SIZE + DATABASE_MAX_OVERFLOW connections at most)
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000  # Restart worker after 1000 requests
max_requests_jitter = 100

# Timeouts
timeout = 30  # Upload requests carry files up to MAX_UPLOAD_SIZE
keepalive = 5
graceful_timeout = 30  # Lets lifespan shutdown dispose the engine

# Process naming
proc_name = "jobboard_api"

# Server mechanics
daemon = False  # Don't run as daemon (Docker handles this)
pidfile = None
umask = 0
tmp_upload_dir = None

# Logging (application logs go through structlog to stdout)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)sus'


# Server hooks
def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Job board API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker times out."""
    worker.log.warning("Worker %s aborted (timeout)", worker.pid)
