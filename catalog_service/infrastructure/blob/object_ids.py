"""Object id generation shared by the blob storage adapters."""

from __future__ import annotations

import mimetypes
import uuid

_PREFERRED_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


def new_object_id(content_type: str) -> str:
    """Unique object name with an extension derived from the content type."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    extension = _PREFERRED_EXTENSIONS.get(media_type) or mimetypes.guess_extension(media_type)
    return f"{uuid.uuid4().hex}{extension or ''}"
