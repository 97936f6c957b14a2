# main.py

import os
import logging
import logging.config
import time
from typing import Optional

# ---- Logging setup (flip with LOG_LEVEL env var) ---------------------
def setup_logging(level: str | None = None) -> None:
    lvl = (level or "INFO").upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "std": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "std",
                "level": lvl,
            }
        },
        "root": {"level": lvl, "handlers": ["console"]},
        "loggers": {
            # keep chatty deps saner
            "hypercorn.access": {"level": os.getenv("ACCESS_LOG_LEVEL", "INFO")},
            "asyncio": {"level": "INFO"},
        },
    })

# ---------------------------------------------------------------------

from quart import Quart, jsonify

from config import Config, get_config
from infra.kv_store import KeyValueStore, RedisKeyValueStore
from logic.user_records import default_id_factory
from routes.redis_users import redis_users_bp

logger = logging.getLogger(__name__)

###############################################################################
# quart APP CREATION
###############################################################################

def create_quart_app(config: Optional[Config] = None, store: Optional[KeyValueStore] = None, id_factory=None):
    """
    Build the Quart application.

    Args:
        config: Configuration to use (defaults to the global CONFIG)
        store: Key-value store to serve from. When omitted a Redis pool is
            opened before serving and closed after serving.
        id_factory: Callable producing new user identifiers (defaults to uuid4)
    """
    config = config or get_config()

    app = Quart(__name__)
    app.config.update(config.to_dict())
    app.kv_store = store
    app.user_id_factory = id_factory or default_id_factory

    # --- Register Blueprints ---
    app.register_blueprint(redis_users_bp, url_prefix='/redis')

    @app.before_serving
    async def init_redis_pool():
        """Open the shared Redis pool unless a store was injected."""
        if app.kv_store is not None:
            return
        redis_store = RedisKeyValueStore.from_config(config)
        try:
            await redis_store.ping()
            conn_kwargs = redis_store.client.connection_pool.connection_kwargs
            logger.info(f"Connected to Redis on {conn_kwargs.get('host')}:{conn_kwargs.get('port')}")
        except Exception as e:
            # keep serving; requests will report store errors until Redis is back
            logger.error(f"Initial Redis ping failed: {e}", exc_info=True)
        app.kv_store = redis_store
        app.owns_kv_store = True

    @app.after_serving
    async def shutdown_redis_pool():
        """Properly close Redis connections on shutdown."""
        if getattr(app, "owns_kv_store", False) and app.kv_store is not None:
            logger.info("Closing shared Redis connection pool...")
            try:
                await app.kv_store.close()
                logger.info("Shared Redis connection pool closed successfully.")
            except Exception as e:
                logger.error(f"Error closing the shared Redis pool: {e}", exc_info=True)

    ###########################################################################
    # HEALTH CHECKS
    ###########################################################################

    @app.route("/health", methods=["GET"])
    async def health_check():
        """Basic health check endpoint."""
        return jsonify({"status": "healthy", "timestamp": time.time()})

    @app.route("/readiness", methods=["GET"])
    async def readiness_check():
        status = {"status": "ready", "timestamp": time.time(), "checks": {}}
        is_ready = True

        # --- Redis Check (re-use existing pool) ---
        try:
            store = app.kv_store
            if store is None:
                status["checks"]["redis"] = "not configured"
                is_ready = False
            else:
                await store.ping()
                status["checks"]["redis"] = "connected"
        except Exception as e:
            status["checks"]["redis"] = f"error: {type(e).__name__}"
            is_ready = False
            logger.warning(f"Readiness Redis check failed: {e}")

        # --- Final Status ---
        if not is_ready:
            status["status"] = "not ready"
            return jsonify(status), 503 # Service Unavailable

        return jsonify(status), 200

    return app


if __name__ == "__main__":
    from dotenv import load_dotenv
    load_dotenv()

    config = Config()
    setup_logging(config.LOG_LEVEL)
    create_quart_app(config).run(host="0.0.0.0", port=config.PORT)
