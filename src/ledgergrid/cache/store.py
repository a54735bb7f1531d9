"""Cache store coordinating the in-process and durable tiers."""

import json
from typing import Any, Callable, Optional, TypeVar

from ledgergrid.cache.base import CacheBackend
from ledgergrid.cache.memory import MemoryCache
from ledgergrid.config import CacheSettings
from ledgergrid.domain.errors import CacheIOError
from ledgergrid.logging_setup import get_logger

T = TypeVar("T")

_logger = get_logger("ledgergrid.cache")


def _serialize(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise CacheIOError(f"Value is not JSON serializable: {e}") from e


def _deserialize(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise CacheIOError(f"Cached value is not valid JSON: {e}") from e


class CacheStore:
    """Read-through cache over an in-process tier and an optional durable tier.

    Lookups try the in-process tier first, then the durable tier, then compute.
    Durable-tier and serialization failures are logged and degrade to
    recomputing; failures raised by the compute function propagate unchanged.
    When the cache is disabled every ``get`` computes and every write is a no-op.
    """

    def __init__(
        self,
        settings: CacheSettings,
        durable: Optional[CacheBackend] = None,
        memory: Optional[MemoryCache] = None,
    ):
        """Initialize cache store.

        Args:
            settings: Cache configuration (switch, default TTL, namespace, keys)
            durable: Optional durable tier shared across sessions
            memory: Optional in-process tier (a fresh one is created if None)
        """
        self.settings = settings
        self.enabled = settings.enabled
        self.durable = durable
        self.memory = memory if memory is not None else MemoryCache()

    def _namespaced(self, key: str) -> str:
        return f"{self.settings.namespace}{key}"

    def _ttl(self, ttl_seconds: Optional[int]) -> int:
        return self.settings.expiry_seconds if ttl_seconds is None else ttl_seconds

    def get(
        self,
        key: str,
        compute_fn: Callable[[], T],
        ttl_seconds: Optional[int] = None,
    ) -> T:
        """Get a cached value, computing and storing it on a miss.

        Args:
            key: Cache key (namespaced internally)
            compute_fn: Function producing the value on a miss
            ttl_seconds: Optional TTL, defaults to the configured expiry

        Returns:
            Cached or freshly computed value
        """
        if not self.enabled:
            return compute_fn()

        ttl = self._ttl(ttl_seconds)
        namespaced_key = self._namespaced(key)

        raw = self.memory.get(namespaced_key)
        if raw is not None:
            try:
                return _deserialize(raw)
            except CacheIOError as e:
                _logger.warning("Dropping unreadable in-process entry %s: %s", key, e)
                self.memory.remove(namespaced_key)

        raw, remaining = self._durable_get(namespaced_key)
        if raw is not None:
            try:
                value = _deserialize(raw)
            except CacheIOError as e:
                _logger.warning("Failed to parse cached value for key %s: %s", key, e)
            else:
                # The in-process copy never outlives the durable entry
                promoted_ttl = ttl if remaining is None else min(ttl, remaining)
                self.memory.put(namespaced_key, raw, promoted_ttl)
                return value

        _logger.debug("Cache miss for %s", key)
        value = compute_fn()
        self._store(namespaced_key, value, ttl)
        return value

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Write a value through both tiers."""
        if not self.enabled:
            return
        self._store(self._namespaced(key), value, self._ttl(ttl_seconds))

    def invalidate(self, key: str) -> None:
        """Remove a key from both tiers."""
        if not self.enabled:
            return
        namespaced_key = self._namespaced(key)
        self.memory.remove(namespaced_key)
        if self.durable is None:
            return
        try:
            self.durable.remove(namespaced_key)
        except CacheIOError as e:
            _logger.warning("Failed to invalidate cache for key %s: %s", key, e)

    def invalidate_by_prefix(self, prefix: str) -> int:
        """Remove in-process entries whose key starts with ``prefix``.

        The durable tier cannot enumerate keys, so it is left untouched.
        """
        if not self.enabled:
            return 0
        removed = self.memory.remove_prefix(self._namespaced(prefix))
        _logger.info(
            "invalidate_by_prefix(%r) removed %d in-process entries; durable tier unaffected",
            prefix,
            removed,
        )
        return removed

    def invalidate_all(self) -> None:
        """Clear the in-process tier and every known key of the durable tier."""
        if not self.enabled:
            return
        self.memory.clear()
        if self.durable is None:
            return
        known = [self._namespaced(key) for key in self.settings.known_keys()]
        try:
            self.durable.remove_all(known)
        except CacheIOError as e:
            _logger.warning("Failed to invalidate known durable cache entries: %s", e)

    def _durable_get(self, namespaced_key: str) -> tuple[Optional[str], Optional[float]]:
        if self.durable is None:
            return None, None
        try:
            return self.durable.get_with_ttl(namespaced_key)
        except CacheIOError as e:
            _logger.warning("Durable cache read failed for %s: %s", namespaced_key, e)
            return None, None

    def _store(self, namespaced_key: str, value: Any, ttl: int) -> None:
        try:
            raw = _serialize(value)
        except CacheIOError as e:
            _logger.warning("Failed to cache result for key %s: %s", namespaced_key, e)
            return

        self.memory.put(namespaced_key, raw, ttl)
        if self.durable is None:
            return
        try:
            self.durable.put(namespaced_key, raw, ttl)
        except CacheIOError as e:
            _logger.warning("Durable cache write failed for %s: %s", namespaced_key, e)
