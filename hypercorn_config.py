# hypercorn_config.py
import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
worker_class = "asyncio"
workers = 1
# graceful_timeout = 5 # Default is 3 seconds, can adjust if needed for shutdown

accesslog = "-"  # Log access to stdout
errorlog = "-"   # Log errors to stderr
