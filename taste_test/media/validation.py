from __future__ import annotations

from typing import Optional

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
}


def validate_image(content_type: Optional[str], size: int, max_bytes: int) -> Optional[str]:
    """
    Check an uploaded image before it reaches the transcript.

    Returns:
        None if the upload is acceptable, otherwise the error message.
    """
    normalized = (content_type or "").split(";")[0].strip().lower()
    if normalized not in ALLOWED_IMAGE_TYPES:
        return f"Unsupported image type: {content_type or 'unknown'}"
    if size > max_bytes:
        return f"Image too large: {size} bytes (limit {max_bytes})"
    return None
