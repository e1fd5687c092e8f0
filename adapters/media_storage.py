"""Local filesystem media storage for recipe images and avatars.

Only the returned filename is ever persisted on documents; the bytes live
under ``settings.upload_dir``.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional
from uuid import uuid4

from app.config import settings
from app.exceptions import ServiceValidationError

logger = logging.getLogger("recipeshare.media")

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def _extension_for(filename: Optional[str], content_type: str) -> str:
    if content_type in _EXTENSIONS:
        return _EXTENSIONS[content_type]
    suffix = Path(filename or "").suffix.lower()
    return suffix or ".img"


def save_image(
    stream: BinaryIO,
    content_type: Optional[str],
    original_name: Optional[str] = None,
    prefix: str = "photo",
) -> str:
    """Store an uploaded image and return the generated filename.

    Raises:
        ServiceValidationError: wrong content type, empty or oversized file
    """
    if not content_type or not content_type.startswith("image/"):
        raise ServiceValidationError(
            "Please upload an image file", code="INVALID_FILE_TYPE"
        )

    data = stream.read(settings.max_upload_bytes + 1)
    if not data:
        raise ServiceValidationError("Please upload a file", code="EMPTY_FILE")
    if len(data) > settings.max_upload_bytes:
        raise ServiceValidationError(
            f"Please upload an image less than {settings.max_upload_bytes} bytes",
            code="FILE_TOO_LARGE",
        )

    filename = f"{prefix}_{uuid4().hex}{_extension_for(original_name, content_type)}"
    os.makedirs(settings.upload_dir, exist_ok=True)
    path = os.path.join(settings.upload_dir, filename)
    with open(path, "wb") as fh:
        fh.write(data)

    logger.info(f"media_stored filename={filename} bytes={len(data)}")
    return filename
