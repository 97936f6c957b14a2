import fnmatch
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from logic.errors import StoreUnavailable  # noqa: E402


class InMemoryKeyValueStore:
    """Dict-backed stand-in for the five store operations the routes use.

    Every call is recorded in ``calls``; operation names listed in ``fail_on``
    raise ``StoreUnavailable`` instead of touching the data.
    """

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: Set[str] = set()

    def _record(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if op in self.fail_on:
            raise StoreUnavailable(detail=f"{op} {key}: simulated outage")

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]

    async def keys(self, pattern: str) -> List[str]:
        self._record("keys", pattern)
        return [key for key in self.data if fnmatch.fnmatchcase(key, pattern)]

    async def get(self, key: str) -> Optional[str]:
        self._record("get", key)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._record("set", key)
        self.data[key] = value

    async def exists(self, key: str) -> bool:
        self._record("exists", key)
        return key in self.data

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        self.data.pop(key, None)

    async def ping(self) -> bool:
        self._record("ping", "")
        return True

    def record(self, key: str):
        return json.loads(self.data[key])


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()
