"""Two-tier cache for ledgergrid."""

from ledgergrid.cache.base import CacheBackend
from ledgergrid.cache.memory import MemoryCache
from ledgergrid.cache.store import CacheStore

__all__ = ["CacheBackend", "MemoryCache", "CacheStore"]
