# logic/user_records.py

"""
Translate user CRUD requests into key-value store operations.

Every record lives under ``<prefix><identifier>`` (``User:<id>`` by default)
as a JSON string. The service holds no state of its own between calls: each
operation awaits one store call at a time, always checking existence before
reading or writing.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, List

from infra.kv_store import KeyValueStore
from logic.errors import AlreadyExists, MalformedData, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "User:"
DEFAULT_LIST_PATTERN = "*"

UserRecord = Dict[str, Any]

MSG_LIST_FAILED = "Error retrieving users"
MSG_GET_FAILED = "Error retrieving user data"
MSG_EXISTS_FAILED = "Error checking if user exists"
MSG_CREATE_FAILED = "Error adding user to database"
MSG_UPDATE_FAILED = "Error updating user in the database"
MSG_DELETE_FAILED = "Error deleting user from database"


def default_id_factory() -> str:
    return str(uuid.uuid4())


def user_key(identifier: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Build the store key for a user identifier."""
    return f"{prefix}{identifier}"


def decode_record(key: str, raw: str) -> UserRecord:
    """Deserialize a stored value, rejecting anything that is not a JSON object."""
    try:
        record = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedData(detail=f"{key}: {e}") from e
    if not isinstance(record, dict):
        raise MalformedData(detail=f"{key}: expected a JSON object, got {type(record).__name__}")
    return record


def encode_record(record: UserRecord) -> str:
    return json.dumps(record)


def merge_records(stored: UserRecord, changes: UserRecord) -> UserRecord:
    """Shallow merge: top-level keys in ``changes`` replace those in ``stored``."""
    return {**stored, **changes}


@contextmanager
def store_step(message: str):
    """Re-label any store or decoding failure inside the block with ``message``."""
    try:
        yield
    except (StoreUnavailable, MalformedData) as e:
        raise type(e)(message, detail=e.detail) from e


class UserRecordService:
    """CRUD over user records held in a ``KeyValueStore``."""

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        list_pattern: str = DEFAULT_LIST_PATTERN,
        id_factory: Callable[[], str] = default_id_factory,
    ):
        self.store = store
        self.key_prefix = key_prefix
        self.list_pattern = list_pattern
        self.id_factory = id_factory

    def key_for(self, identifier: str) -> str:
        return user_key(identifier, self.key_prefix)

    async def list_users(self) -> List[UserRecord]:
        """
        Fetch and decode every record under the list pattern.

        Records come back in the store's key iteration order. A single failed
        fetch or undecodable value fails the whole listing.
        """
        users: List[UserRecord] = []
        with store_step(MSG_LIST_FAILED):
            keys = await self.store.keys(self.list_pattern)
            for key in keys:
                raw = await self.store.get(key)
                if raw is None:
                    # deleted since KEYS
                    logger.debug(f"Key {key} vanished during listing")
                    continue
                users.append(decode_record(key, raw))
        return users

    async def get_user(self, identifier: str) -> UserRecord:
        key = self.key_for(identifier)
        with store_step(MSG_GET_FAILED):
            raw = await self.store.get(key)
            if raw is None:
                raise NotFound()
            return decode_record(key, raw)

    async def create_user(self, record: UserRecord) -> str:
        """Store ``record`` under a fresh identifier and return that identifier."""
        identifier = self.id_factory()
        key = self.key_for(identifier)

        with store_step(MSG_EXISTS_FAILED):
            if await self.store.exists(key):
                raise AlreadyExists(f"User with ID {identifier} already exists")

        with store_step(MSG_CREATE_FAILED):
            await self.store.set(key, encode_record(record))

        logger.info(f"Created user {key}")
        return identifier

    async def update_user(self, identifier: str, changes: UserRecord) -> UserRecord:
        """Shallow-merge ``changes`` into an existing record and return the result."""
        key = self.key_for(identifier)

        with store_step(MSG_EXISTS_FAILED):
            if not await self.store.exists(key):
                raise NotFound()

        with store_step(MSG_UPDATE_FAILED):
            raw = await self.store.get(key)
            if raw is None:
                raise NotFound()
            merged = merge_records(decode_record(key, raw), changes)
            await self.store.set(key, encode_record(merged))

        logger.info(f"Updated user {key} ({', '.join(sorted(changes)) or 'no fields'})")
        return merged

    async def delete_user(self, identifier: str) -> None:
        key = self.key_for(identifier)

        with store_step(MSG_EXISTS_FAILED):
            if not await self.store.exists(key):
                raise NotFound()

        with store_step(MSG_DELETE_FAILED):
            await self.store.delete(key)

        logger.info(f"Deleted user {key}")


__all__ = [
    "UserRecord",
    "UserRecordService",
    "decode_record",
    "encode_record",
    "merge_records",
    "user_key",
]
