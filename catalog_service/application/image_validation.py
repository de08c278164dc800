"""Checks applied to every uploaded image payload."""

from __future__ import annotations

from ..domain.exceptions import InvalidImageException

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def validate_image(data: bytes, content_type: str | None) -> str:
    """Return the normalized media type of a valid image upload.

    Raises:
        InvalidImageException: If the payload is empty, too large or not a
            supported image type
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidImageException(
            f"Unsupported image type '{media_type or 'unknown'}'. "
            f"Allowed: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}"
        )
    if not data:
        raise InvalidImageException("Image payload is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise InvalidImageException(f"Image exceeds the maximum size of {MAX_IMAGE_BYTES} bytes")
    return media_type
