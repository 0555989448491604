"""In-memory caching primitives for weather lookups."""

from .locks import ReadWriteLock
from .manager import DEFAULT_TTL_SECONDS, CacheManager, normalize_key
from .store import DEFAULT_MAX_ENTRIES, CacheEntry, EntryStore

__all__ = [
    "CacheEntry",
    "CacheManager",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL_SECONDS",
    "EntryStore",
    "ReadWriteLock",
    "normalize_key",
]
