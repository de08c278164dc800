"""In-memory cache backend for development and tests."""

from __future__ import annotations

import time
from collections.abc import Callable

from ...domain.exceptions import CacheBackendError
from ...ports.cache_backend import CacheBackendPort


class InMemoryCacheBackend(CacheBackendPort):
    """Process-local key-value backend with per-entry expiry.

    Expiry uses a monotonic clock; pass ``clock`` to drive it from tests.
    ``available`` can be switched off to simulate an unreachable backend.
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.monotonic
        self._entries: dict[str, tuple[bytes, float | None]] = {}
        self.available = True

    def _check_available(self, operation: str, key: str) -> None:
        if not self.available:
            raise CacheBackendError("Cache backend unavailable", key=key, operation=operation)

    def _live_entry(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def get(self, key: str) -> bytes | None:
        self._check_available("get", key)
        return self._live_entry(key)

    async def set(self, key: str, value: bytes, ttl_seconds: float | None = None) -> None:
        self._check_available("set", key)
        expires_at = None if ttl_seconds is None else self._clock() + ttl_seconds
        self._entries[key] = (bytes(value), expires_at)

    async def delete(self, key: str) -> bool:
        self._check_available("delete", key)
        return self._entries.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        self._check_available("exists", key)
        return self._live_entry(key) is not None

    def keys(self) -> list[str]:
        """Keys of all live entries."""
        return [key for key in list(self._entries) if self._live_entry(key) is not None]

    def clear(self) -> None:
        self._entries.clear()
