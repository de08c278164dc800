"""Blob storage port for image payloads."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BlobStoragePort(ABC):
    """Abstract interface for storing binary objects in named buckets."""

    @abstractmethod
    async def upload(self, bucket: str, data: bytes, content_type: str) -> str:
        """Store ``data`` and return the generated object id."""
        ...

    @abstractmethod
    async def delete(self, bucket: str, object_id: str) -> bool:
        """Delete an object. Returns False if it did not exist."""
        ...
