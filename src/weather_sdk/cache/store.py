"""Bounded entry storage with least-recently-touched eviction."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from cachetools import Cache, LRUCache

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 10


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A stored value together with the clock reading at which it was stored."""

    value: T
    stored_at: float


class EntryStore(Generic[T]):
    """Access-ordered mapping backed by ``cachetools.LRUCache``.

    Both reads (:meth:`touch_and_get`) and writes (:meth:`put`) move a key to the
    most-recently-used end; inserting past ``maxsize`` evicts exactly one entry,
    the one touched longest ago. The store itself is not thread-safe; callers
    serialize access (see :class:`weather_sdk.cache.manager.CacheManager`).
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._entries: LRUCache[str, CacheEntry[T]] = LRUCache(maxsize=maxsize)
        self._maxsize = maxsize
        self._clock = clock

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def touch_and_get(self, key: str) -> CacheEntry[T] | None:
        """Return the entry for ``key`` (valid or not) and mark it most recent."""

        # LRUCache.get goes through __getitem__, which refreshes recency.
        return self._entries.get(key)

    def peek(self, key: str) -> CacheEntry[T] | None:
        """Return the entry for ``key`` without changing its recency."""

        # Cache.__getitem__ skips the LRU bookkeeping done by LRUCache.__getitem__.
        try:
            return Cache.__getitem__(self._entries, key)
        except KeyError:
            return None

    def put(self, key: str, value: T) -> None:
        """Store ``value`` stamped with the current clock reading."""

        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> set[str]:
        """Return a snapshot of the stored keys."""

        return set(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["DEFAULT_MAX_ENTRIES", "CacheEntry", "EntryStore"]
