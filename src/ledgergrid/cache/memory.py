"""In-process cache tier."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ledgergrid.cache.base import CacheBackend


@dataclass(frozen=True)
class _Entry:
    value: str
    expires_at: float


class MemoryCache(CacheBackend):
    """Dictionary-backed cache tier that lives for the duration of the process."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize memory cache.

        Args:
            clock: Function returning the current time in seconds
        """
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl_seconds)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def remove_all(self, keys: list[str]) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def remove_prefix(self, prefix: str) -> int:
        """Remove every key starting with ``prefix``. Returns the number removed."""
        matching = [key for key in self._entries if key.startswith(prefix)]
        for key in matching:
            del self._entries[key]
        return len(matching)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
