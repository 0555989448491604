"""TTL-aware, thread-safe cache of weather lookups keyed by city name."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from .locks import ReadWriteLock
from .store import DEFAULT_MAX_ENTRIES, CacheEntry, EntryStore

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 10 * 60

logger = logging.getLogger(__name__)


def normalize_key(key: str) -> str:
    """Case-fold a lookup key so ``Tokyo`` and ``tokyo`` share an entry."""

    return key.strip().lower()


class CacheManager(Generic[T]):
    """Wraps an :class:`EntryStore` with TTL semantics and a shared/exclusive lock.

    Lookups of present-and-valid or absent keys run under the shared lock.
    Finding an expired entry upgrades to the exclusive lock, re-checks the
    entry (a concurrent ``put`` may have refreshed it in between) and only
    then drops it.
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._store: EntryStore[T] = EntryStore(maxsize, clock=clock)
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = ReadWriteLock()
        # Shared readers still reorder the LRU bookkeeping on every touch.
        self._touch_lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def maxsize(self) -> int:
        return self._store.maxsize

    def get_if_valid(self, key: str) -> T | None:
        """Return the cached value if it exists and is still valid."""

        normalized = normalize_key(key)
        with self._lock.read_locked():
            with self._touch_lock:
                entry = self._store.touch_and_get(normalized)
            if entry is None:
                return None
            if self._is_valid(entry):
                return entry.value

        with self._lock.write_locked():
            entry = self._store.touch_and_get(normalized)
            if entry is None:
                return None
            if self._is_valid(entry):
                return entry.value
            self._store.remove(normalized)
        logger.debug("Evicted expired cache entry", extra={"cache_key": normalized})
        return None

    def put(self, key: str, value: T) -> None:
        """Store ``value`` under ``key``, stamping it with the current time."""

        normalized = normalize_key(key)
        with self._lock.write_locked():
            self._store.put(normalized, value)

    def replace(self, key: str, value: T) -> bool:
        """Overwrite ``key`` only if it is still stored; return whether it was.

        The presence check does not touch recency, and a key that was evicted
        or expired away in the meantime is not brought back.
        """

        normalized = normalize_key(key)
        with self._lock.write_locked():
            if normalized not in self._store:
                return False
            self._store.put(normalized, value)
        return True

    def stored_at(self, key: str) -> float | None:
        """Clock reading of the entry's last write, or ``None`` if absent."""

        normalized = normalize_key(key)
        with self._lock.read_locked():
            with self._touch_lock:
                entry = self._store.peek(normalized)
        return None if entry is None else entry.stored_at

    def remove(self, key: str) -> None:
        normalized = normalize_key(key)
        with self._lock.write_locked():
            self._store.remove(normalized)

    def keys(self) -> set[str]:
        """Return a snapshot of the cached keys, safe to iterate without locking."""

        with self._lock.read_locked():
            with self._touch_lock:
                return self._store.keys()

    def clear(self) -> None:
        """Remove all cached entries."""

        with self._lock.write_locked():
            self._store.clear()

    def __len__(self) -> int:
        with self._lock.read_locked():
            with self._touch_lock:
                return len(self._store)

    def _is_valid(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.stored_at < self._ttl


__all__ = ["DEFAULT_TTL_SECONDS", "CacheManager", "normalize_key"]
