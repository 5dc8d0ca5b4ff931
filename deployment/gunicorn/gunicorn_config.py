import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

# One process only: flat-file storage serializes writes with in-process locks,
# so concurrency comes from threads
workers = 1
worker_class = "gthread"
threads = int(os.getenv('GUNICORN_THREADS', 8))
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
timeout = 60
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "portfolio-backend"

# Server mechanics
daemon = False

# Server hooks
def post_worker_init(worker):
    """Called after a worker has loaded the application (and chosen its store)."""
    from core.storage import get_store
    worker.log.info(f"Worker ready with {get_store().mode} storage")
