"""Cache backend port - shared key/value store with TTL expiry."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheBackendPort(ABC):
    """Abstract interface for the shared cache store.

    Values are opaque bytes; the cache manager owns serialization.
    Implementations raise ``CacheBackendError`` on connectivity failures.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Get the raw value stored under ``key``.

        Returns:
            The stored bytes, or None if absent or expired
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: float | None = None) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: Cache key
            value: Serialized payload
            ttl_seconds: Expiry in seconds, None for no expiry
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete ``key``.

        Returns:
            True if a value was removed, False if the key was already absent
        """
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a live value is stored under ``key``."""
        ...
