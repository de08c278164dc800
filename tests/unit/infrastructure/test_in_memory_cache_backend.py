"""Tests for the in-memory cache backend."""

from __future__ import annotations

import pytest

from catalog_service.domain.exceptions import CacheBackendError


class TestInMemoryCacheBackend:
    async def test_set_get_delete(self, cache_backend):
        await cache_backend.set("Brand_1", b"payload", 60)

        assert await cache_backend.get("Brand_1") == b"payload"
        assert await cache_backend.exists("Brand_1")
        assert await cache_backend.delete("Brand_1") is True
        assert await cache_backend.get("Brand_1") is None
        assert await cache_backend.delete("Brand_1") is False

    async def test_overwrite_resets_expiry(self, cache_backend, clock):
        await cache_backend.set("Brand_1", b"old", 60)
        clock.advance(50)
        await cache_backend.set("Brand_1", b"new", 60)
        clock.advance(50)

        assert await cache_backend.get("Brand_1") == b"new"

    async def test_expired_entries_disappear(self, cache_backend, clock):
        await cache_backend.set("Brand_1", b"payload", 60)
        await cache_backend.set("Brand_All", b"list", None)

        clock.advance(60)

        assert await cache_backend.get("Brand_1") is None
        assert not await cache_backend.exists("Brand_1")
        assert cache_backend.keys() == ["Brand_All"]

    async def test_unavailable_backend_raises(self, cache_backend):
        cache_backend.available = False

        with pytest.raises(CacheBackendError) as exc_info:
            await cache_backend.get("Brand_1")
        assert exc_info.value.operation == "get"
        with pytest.raises(CacheBackendError):
            await cache_backend.set("Brand_1", b"x", 60)
        with pytest.raises(CacheBackendError):
            await cache_backend.delete("Brand_1")

    async def test_clear(self, cache_backend):
        await cache_backend.set("Brand_1", b"x", 60)
        cache_backend.clear()
        assert cache_backend.keys() == []
