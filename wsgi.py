# wsgi.py

import os
from dotenv import load_dotenv
load_dotenv()                      # dev only; no-op when the env is already set

from config import get_config
from main import create_quart_app, setup_logging

# ensure Hypercorn sees PORT
os.environ.setdefault("PORT", str(get_config().PORT))

setup_logging(get_config().LOG_LEVEL)
app = create_quart_app()
