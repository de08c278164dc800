"""Blob storage backed by NATS JetStream object stores."""

from __future__ import annotations

from nats.js import JetStreamContext
from nats.js.api import ObjectMeta
from nats.js.errors import BucketNotFoundError, NotFoundError, ObjectNotFoundError
from nats.js.object_store import ObjectStore

from ...domain.exceptions import BlobStorageException
from ...ports.blob_storage import BlobStoragePort
from ...ports.logger import LoggerPort
from ..simple_logger import SimpleLogger
from .object_ids import new_object_id


class NATSObjectBlobStorage(BlobStoragePort):
    """One JetStream object store per bucket, created on first use."""

    def __init__(self, js: JetStreamContext, logger: LoggerPort | None = None):
        self._js = js
        self._logger = logger or SimpleLogger("catalog_service.blob.nats")
        self._stores: dict[str, ObjectStore] = {}

    async def _store(self, bucket: str) -> ObjectStore:
        store = self._stores.get(bucket)
        if store is not None:
            return store
        try:
            store = await self._js.object_store(bucket)
        except (BucketNotFoundError, NotFoundError):
            self._logger.info("Creating object store", bucket=bucket)
            store = await self._js.create_object_store(bucket=bucket)
        self._stores[bucket] = store
        return store

    async def upload(self, bucket: str, data: bytes, content_type: str) -> str:
        object_id = new_object_id(content_type)
        try:
            store = await self._store(bucket)
            meta = ObjectMeta(name=object_id, description=content_type)
            await store.put(object_id, data, meta=meta)
        except Exception as e:
            raise BlobStorageException(f"Failed to upload object: {e}", bucket=bucket) from e
        self._logger.debug("Object uploaded", bucket=bucket, object_id=object_id, size=len(data))
        return object_id

    async def delete(self, bucket: str, object_id: str) -> bool:
        try:
            store = await self._store(bucket)
            await store.delete(object_id)
        except ObjectNotFoundError:
            return False
        except Exception as e:
            raise BlobStorageException(f"Failed to delete object: {e}", bucket=bucket) from e
        self._logger.debug("Object deleted", bucket=bucket, object_id=object_id)
        return True
