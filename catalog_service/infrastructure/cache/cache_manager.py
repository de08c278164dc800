"""Read-through cache manager shared by the cached repositories."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ...domain.exceptions import CacheBackendError, CacheException, SerializationError
from ...ports.cache_backend import CacheBackendPort
from ...ports.logger import LoggerPort
from ...ports.metrics import MetricsPort
from .keys import entity_type_of
from .serialization import CacheCodec

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0

# Keys held back while a store transaction is open in the current task
_deferred_keys: ContextVar[list[str] | None] = ContextVar("deferred_cache_keys", default=None)


class CacheConfig(BaseModel):
    """Configuration for the catalog cache."""

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        validate_assignment=True,
    )

    ttl_seconds: float = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    fail_open: bool = Field(default=True)
    enable_metrics: bool = Field(default=True)


class CacheManager:
    """Read-through cache over a ``CacheBackendPort``.

    ``get_from_cache`` serves a key from the backend when a decodable value is
    present, otherwise runs the supplied store fetch and stores a non-null
    result under the key. Absent results are never cached. A payload that
    fails to decode is reported and treated as a miss, and the subsequent
    populate overwrites it.

    Store errors always propagate unchanged. Backend errors are governed by
    ``CacheConfig.fail_open``: when set, a failed read degrades to a miss
    that skips the populate, and failed writes or deletes are logged and
    counted; otherwise they raise ``CacheException``.
    """

    def __init__(
        self,
        backend: CacheBackendPort,
        config: CacheConfig | None = None,
        metrics: MetricsPort | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the cache manager.

        Args:
            backend: Shared key-value backend holding serialized values
            config: Cache configuration (defaults used if None)
            metrics: Optional metrics port for cache statistics
            logger: Optional logger for diagnostics
        """
        self._backend = backend
        self._config = config or CacheConfig()
        self._metrics = metrics
        self._logger = logger
        self._cache_hits = 0
        self._cache_misses = 0
        self._invalidations = 0
        self._errors = 0

    @property
    def default_ttl_seconds(self) -> float:
        return self._config.ttl_seconds

    async def get_from_cache(
        self,
        key: str,
        fetch_from_store: Callable[[], Awaitable[T | None]],
        codec: CacheCodec[T],
        ttl_seconds: float | None = None,
    ) -> T | None:
        """Return the cached value for ``key`` or load and cache it.

        Args:
            key: Cache key following the catalog key scheme
            fetch_from_store: Loads the authoritative value on a miss
            codec: Converts the value to and from its cached bytes
            ttl_seconds: Entry lifetime; None stores without expiry

        Returns:
            The cached or freshly loaded value, or None when the store has none
        """
        backend_up, payload = await self._read(key)
        if payload is not None:
            try:
                value = codec.decode(payload)
            except SerializationError as e:
                self._record_corrupt(key, e)
            else:
                self._record_hit(key)
                return value

        self._record_miss(key)
        result = await self._fetch(key, fetch_from_store)
        if result is None:
            if self._logger:
                self._logger.debug("Store returned no value, not caching", key=key)
            return None

        if backend_up:
            await self._write(key, result, codec, ttl_seconds)
        return result

    async def invalidate_cache(self, keys: Iterable[str]) -> None:
        """Remove each key from the cache; absent keys are not an error.

        Inside ``deferred_invalidation`` the keys are only collected and are
        removed when the block exits.
        """
        pending = _deferred_keys.get()
        if pending is not None:
            pending.extend(keys)
            return

        failures: list[str] = []
        for key in dict.fromkeys(keys):
            try:
                await self._backend.delete(key)
            except CacheBackendError as e:
                failures.append(key)
                self._record_error("invalidate", key, e)
                continue
            self._invalidations += 1
            if self._config.enable_metrics and self._metrics:
                self._metrics.increment("cache.invalidations")
            if self._logger:
                self._logger.debug("Cache entry invalidated", key=key)

        if failures and not self._config.fail_open:
            raise CacheException(
                f"Failed to invalidate {len(failures)} cache key(s)", key=failures[0]
            )

    @asynccontextmanager
    async def deferred_invalidation(self) -> AsyncIterator[None]:
        """Hold back invalidations until the block exits.

        Wraps a store transaction so that keys written inside it are removed
        only once the transaction has committed or rolled back. Keys are
        flushed on both paths. Nested blocks join the outermost one.
        """
        if _deferred_keys.get() is not None:
            yield
            return

        pending: list[str] = []
        token = _deferred_keys.set(pending)
        try:
            yield
        finally:
            _deferred_keys.reset(token)
            if pending:
                await self.invalidate_cache(pending)

    async def key_exists(self, key: str) -> bool:
        """Whether the backend currently holds ``key``."""
        try:
            return await self._backend.exists(key)
        except CacheBackendError as e:
            self._record_error("exists", key, e)
            if not self._config.fail_open:
                raise CacheException(f"Cache lookup failed for {key}", key=key) from e
            return False

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics for this process."""
        return {
            "hits": self._cache_hits,
            "misses": self._cache_misses,
            "hit_rate": self._get_hit_rate(),
            "invalidations": self._invalidations,
            "errors": self._errors,
            "ttl_seconds": self._config.ttl_seconds,
            "fail_open": self._config.fail_open,
        }

    async def _fetch(
        self, key: str, fetch_from_store: Callable[[], Awaitable[T | None]]
    ) -> T | None:
        if not (self._config.enable_metrics and self._metrics):
            return await fetch_from_store()
        with self._metrics.timer(f"store.fetch.{entity_type_of(key)}"):
            return await fetch_from_store()

    async def _read(self, key: str) -> tuple[bool, bytes | None]:
        """Returns whether the backend answered, and the stored payload."""
        try:
            return True, await self._backend.get(key)
        except CacheBackendError as e:
            self._record_error("get", key, e)
            if not self._config.fail_open:
                raise CacheException(f"Cache read failed for {key}", key=key) from e
            return False, None

    async def _write(
        self, key: str, value: T, codec: CacheCodec[T], ttl_seconds: float | None
    ) -> None:
        try:
            payload = codec.encode(value)
        except SerializationError as e:
            self._record_error("encode", key, e)
            return

        try:
            await self._backend.set(key, payload, ttl_seconds)
        except CacheBackendError as e:
            self._record_error("set", key, e)
            if not self._config.fail_open:
                raise CacheException(f"Cache write failed for {key}", key=key) from e
            return

        if self._logger:
            self._logger.debug("Cache entry populated", key=key, ttl_seconds=ttl_seconds)

    def _get_hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self._cache_hits + self._cache_misses
        if total == 0:
            return 0.0
        return self._cache_hits / total

    def _record_hit(self, key: str) -> None:
        self._cache_hits += 1
        if self._config.enable_metrics and self._metrics:
            self._metrics.increment(f"cache.hits.{entity_type_of(key)}")
        if self._logger:
            self._logger.debug("Cache hit", key=key, hit_rate=self._get_hit_rate())

    def _record_miss(self, key: str) -> None:
        self._cache_misses += 1
        if self._config.enable_metrics and self._metrics:
            self._metrics.increment(f"cache.misses.{entity_type_of(key)}")
        if self._logger:
            self._logger.debug("Cache miss", key=key, hit_rate=self._get_hit_rate())

    def _record_corrupt(self, key: str, error: SerializationError) -> None:
        if self._config.enable_metrics and self._metrics:
            self._metrics.increment("cache.corrupt_entries")
        if self._logger:
            self._logger.warning("Discarding undecodable cache entry", key=key, error=str(error))

    def _record_error(self, operation: str, key: str, error: Exception) -> None:
        self._errors += 1
        if self._config.enable_metrics and self._metrics:
            self._metrics.increment("cache.errors")
        if self._logger:
            self._logger.error(
                "Cache operation failed", operation=operation, key=key, error=str(error)
            )
