"""Thread-safe in-memory key-value store with a request counter.

Every public operation runs under a single lock, so operations are totally
ordered and never observe a half-applied mutation from another caller.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from threading import Lock


class StoreError(Exception):
    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key


class InvalidKeyError(StoreError):
    def __init__(self, key: str):
        super().__init__(key, "Key is required")


class KeyNotFoundError(StoreError):
    def __init__(self, key: str):
        super().__init__(key, "Key not found")


@dataclass(frozen=True)
class StoreStats:
    requests: int
    database_size: int


class Store:
    def __init__(self) -> None:
        self._lock = Lock()
        self._data: dict[str, str] = {}
        self._requests = 0

    def put_all(self, entries: Mapping[str, str]) -> None:
        """Merge ``entries`` into the map, overwriting existing keys.

        Counts as one request whatever the number of entries, including zero.
        """
        with self._lock:
            self._data.update(entries)
            self._requests += 1

    def get_all(self) -> dict[str, str]:
        with self._lock:
            self._requests += 1
            return dict(self._data)

    def delete(self, key: str) -> None:
        """Remove ``key``.

        Only a successful delete is counted; an empty or absent key raises
        without touching the counter.
        """
        if not key:
            raise InvalidKeyError(key)
        with self._lock:
            if key not in self._data:
                raise KeyNotFoundError(key)
            del self._data[key]
            self._requests += 1

    def stats(self) -> StoreStats:
        """Return counters as they were before this call, then count it."""
        with self._lock:
            snapshot = StoreStats(requests=self._requests, database_size=len(self._data))
            self._requests += 1
            return snapshot

    def peek_stats(self) -> StoreStats:
        with self._lock:
            return StoreStats(requests=self._requests, database_size=len(self._data))
