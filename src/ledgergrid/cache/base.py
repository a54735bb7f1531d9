"""Abstract cache backend interface."""

from abc import ABC, abstractmethod
from typing import Optional


class CacheBackend(ABC):
    """String key/value store with per-entry expiry.

    Both cache tiers implement this interface; values are serialized strings
    so that a tier never hands out a shared mutable object.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get a value, or None when missing or expired."""
        pass

    def get_with_ttl(self, key: str) -> tuple[Optional[str], Optional[float]]:
        """Get a value with its remaining lifetime in seconds.

        The lifetime is None when the tier does not track it.
        """
        return self.get(key), None

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value, replacing any existing entry."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a single key. Missing keys are ignored."""
        pass

    @abstractmethod
    def remove_all(self, keys: list[str]) -> None:
        """Remove every listed key."""
        pass
