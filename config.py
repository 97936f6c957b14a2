# config.py

"""
Centralized configuration for the Redis user service.
Uses environment variables with sensible defaults.
"""

import os
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to the default on bad input."""
    raw_value = os.getenv(name)
    if raw_value in (None, ""):
        return default
    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            "Invalid %s value %r provided. Falling back to default %d.",
            name,
            raw_value,
            default,
        )
        return default


def _env_float(name: str, default: float) -> float:
    """Return a positive float from the environment or a default."""
    raw_value = os.getenv(name)
    if raw_value in (None, ""):
        return default
    try:
        value = float(raw_value)
        if value <= 0:
            raise ValueError
        return value
    except ValueError:
        logger.warning(
            "Invalid %s value %r provided. Falling back to default %.2f seconds.",
            name,
            raw_value,
            default,
        )
        return default


class Config:
    """Configuration management with environment-based configuration."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        # Redis Configuration
        self.REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
        self.REDIS_PORT = _env_int("REDIS_PORT", 6379)
        self.REDIS_DB = _env_int("REDIS_DB", 0)
        self.REDIS_URL = os.getenv(
            "REDIS_URL",
            f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}",
        )
        self.REDIS_MAX_CONNECTIONS = _env_int("REDIS_MAX_CONNECTIONS", 10)
        self.REDIS_SOCKET_TIMEOUT = _env_float("REDIS_SOCKET_TIMEOUT", 5.0)
        self.REDIS_CONNECT_TIMEOUT = _env_float("REDIS_CONNECT_TIMEOUT", 5.0)

        # User record layout
        self.USER_KEY_PREFIX = os.getenv("USER_KEY_PREFIX", "User:")
        self.USER_LIST_PATTERN = os.getenv("USER_LIST_PATTERN", "*")

        # Server
        self.PORT = _env_int("PORT", 3000)

        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def __str__(self) -> str:
        """String representation of configuration."""
        return str(self.to_dict())

    def get(self, key, default=None):
        """Get configuration value with optional default."""
        return getattr(self, key, default)

# Create global instance
CONFIG = Config()

# Helper functions
def get_config():
    """Get the global configuration instance."""
    return CONFIG

def get(key, default=None):
    """Get configuration value with fallback."""
    return CONFIG.get(key, default)
