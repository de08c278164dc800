"""NATS JetStream Key-Value cache backend."""

from __future__ import annotations

from nats.js import JetStreamContext
from nats.js.errors import BucketNotFoundError, KeyNotFoundError
from nats.js.kv import KeyValue

from ...domain.exceptions import CacheBackendError
from ...ports.cache_backend import CacheBackendPort
from ...ports.logger import LoggerPort
from ..simple_logger import SimpleLogger

INVALID_KEY_CHARS = {".", "*", ">", "/", "\\", ":", " ", "\t"}


class NATSKVCacheBackend(CacheBackendPort):
    """Cache backend storing entries in a JetStream KV bucket.

    The bucket is created on ``connect`` when it does not exist, with its
    TTL set to the cache TTL. JetStream applies that TTL to every entry in
    the bucket, so a different per-call TTL is logged and not applied.
    """

    def __init__(
        self,
        js: JetStreamContext,
        bucket: str,
        ttl_seconds: float | None = None,
        logger: LoggerPort | None = None,
    ):
        self._js = js
        self._bucket = bucket
        self._ttl_seconds = ttl_seconds
        self._logger = logger or SimpleLogger("catalog_service.cache.nats_kv")
        self._kv: KeyValue | None = None

    async def connect(self) -> None:
        """Bind to the bucket, creating it when missing."""
        try:
            try:
                self._kv = await self._js.key_value(self._bucket)
            except BucketNotFoundError:
                self._logger.info(
                    "Creating cache bucket", bucket=self._bucket, ttl_seconds=self._ttl_seconds
                )
                self._kv = await self._js.create_key_value(
                    bucket=self._bucket, ttl=self._ttl_seconds, history=1
                )
        except Exception as e:
            raise CacheBackendError(
                f"Failed to connect to cache bucket '{self._bucket}': {e}", operation="connect"
            ) from e
        self._logger.info("Connected to cache bucket", bucket=self._bucket)

    def _require_kv(self, operation: str, key: str) -> KeyValue:
        if self._kv is None:
            raise CacheBackendError("Cache backend not connected", key=key, operation=operation)
        return self._kv

    def _validate_key(self, key: str) -> None:
        """Reject keys NATS KV cannot address."""
        for char in INVALID_KEY_CHARS:
            if char in key:
                raise ValueError(f"Key '{key}' contains invalid character '{char}'")

    async def get(self, key: str) -> bytes | None:
        kv = self._require_kv("get", key)
        self._validate_key(key)
        try:
            entry = await kv.get(key)
        except KeyNotFoundError:
            # also covers delete markers and purged keys
            return None
        except Exception as e:
            raise CacheBackendError(f"Cache get failed: {e}", key=key, operation="get") from e
        return entry.value or None

    async def set(self, key: str, value: bytes, ttl_seconds: float | None = None) -> None:
        kv = self._require_kv("set", key)
        self._validate_key(key)
        if ttl_seconds is not None and ttl_seconds != self._ttl_seconds:
            self._logger.debug(
                "Per-entry TTL not supported, using bucket TTL",
                key=key,
                requested=ttl_seconds,
                bucket_ttl=self._ttl_seconds,
            )
        try:
            await kv.put(key, value)
        except Exception as e:
            raise CacheBackendError(f"Cache set failed: {e}", key=key, operation="set") from e

    async def delete(self, key: str) -> bool:
        kv = self._require_kv("delete", key)
        self._validate_key(key)
        try:
            return bool(await kv.delete(key))
        except KeyNotFoundError:
            return False
        except Exception as e:
            raise CacheBackendError(
                f"Cache delete failed: {e}", key=key, operation="delete"
            ) from e

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None
