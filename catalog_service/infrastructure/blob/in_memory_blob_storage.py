"""In-memory blob storage for development and tests."""

from __future__ import annotations

from collections import defaultdict

from ...ports.blob_storage import BlobStoragePort
from .object_ids import new_object_id


class InMemoryBlobStorage(BlobStoragePort):
    """Keeps uploaded objects in per-bucket dicts."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, tuple[bytes, str]]] = defaultdict(dict)

    async def upload(self, bucket: str, data: bytes, content_type: str) -> str:
        object_id = new_object_id(content_type)
        self._buckets[bucket][object_id] = (bytes(data), content_type)
        return object_id

    async def delete(self, bucket: str, object_id: str) -> bool:
        return self._buckets[bucket].pop(object_id, None) is not None

    def get(self, bucket: str, object_id: str) -> bytes | None:
        entry = self._buckets[bucket].get(object_id)
        return entry[0] if entry else None

    def objects(self, bucket: str) -> list[str]:
        return list(self._buckets[bucket])
