"""Key-value store access for user records.

The routes only ever need five operations from the store: enumerate keys,
get, set, exists and delete. ``KeyValueStore`` names that contract and
``RedisKeyValueStore`` fulfils it on top of a shared ``redis.asyncio`` pool.
Every Redis client failure leaves this module as ``StoreUnavailable``.
Values that cannot be decoded as UTF-8 leave it as ``MalformedData``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol

from redis import asyncio as redis_async
from redis.exceptions import RedisError

from logic.errors import MalformedData, StoreUnavailable

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """The store operations the user routes and readiness check depend on."""

    async def keys(self, pattern: str) -> List[str]: ...

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def exists(self, key: str) -> bool: ...

    async def delete(self, key: str) -> None: ...

    async def ping(self) -> bool: ...


class RedisKeyValueStore:
    """``KeyValueStore`` backed by a ``redis.asyncio.Redis`` client.

    The client may be shared between concurrent requests; this class holds no
    other state.
    """

    def __init__(self, client: redis_async.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: Any) -> "RedisKeyValueStore":
        """Create the connection pool described by ``config``."""
        client = redis_async.from_url(
            config.REDIS_URL,
            decode_responses=True,
            max_connections=config.REDIS_MAX_CONNECTIONS,
            socket_timeout=config.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=config.REDIS_CONNECT_TIMEOUT,
        )
        return cls(client)

    @property
    def client(self) -> redis_async.Redis:
        return self._client

    async def keys(self, pattern: str) -> List[str]:
        try:
            return list(await self._client.keys(pattern))
        except RedisError as e:
            raise self._unavailable("KEYS", pattern, e) from e

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(key)
        except UnicodeDecodeError as e:
            # decode_responses=True cannot turn non-UTF-8 bytes into str
            logger.warning(f"Redis GET {key!r} returned undecodable bytes: {e}")
            raise MalformedData(detail=f"{key}: value is not valid UTF-8 ({e})") from e
        except RedisError as e:
            raise self._unavailable("GET", key, e) from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value)
        except RedisError as e:
            raise self._unavailable("SET", key, e) from e

    async def exists(self, key: str) -> bool:
        try:
            return await self._client.exists(key) > 0
        except RedisError as e:
            raise self._unavailable("EXISTS", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            raise self._unavailable("DEL", key, e) from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            raise self._unavailable("PING", "", e) from e

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _unavailable(command: str, key: str, error: Exception) -> StoreUnavailable:
        logger.warning(f"Redis {command} {key!r} failed: {error}")
        return StoreUnavailable(detail=f"{command} {key}: {type(error).__name__}: {error}")
