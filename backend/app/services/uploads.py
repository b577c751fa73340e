"""
Cover image uploads.

A project accepts at most one cover image. It must be a jpeg/jpg/png/gif
by BOTH file extension and declared media type, and no larger than 5 MiB.
Validation always happens before anything touches the disk, so a rejected
file is never retained.

Storage is a capability (ImageStore) rather than a hard-wired directory:
the router only needs store(bytes, name) -> path, which keeps the
filesystem out of the database code and lets tests swap in a fake.
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Protocol

import anyio

from app.core.errors import UploadValidationError

logger = logging.getLogger(__name__)

# ── Limits ──────────────────────────────────────────────────
COVER_IMAGE_FIELD = "coverImage"
UPLOADS_URL_PREFIX = "/uploads"
MAX_IMAGE_BYTES = 5 * 1024 * 1024

ALLOWED_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif"})
ALLOWED_MEDIA_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif"})

# ── Client-facing messages ──────────────────────────────────
INVALID_TYPE_MESSAGE = "Only image files are allowed (jpeg, jpg, png, gif)"
TOO_LARGE_MESSAGE = "File too large"
UNEXPECTED_FIELD_MESSAGE = "Unexpected field"


@dataclass(frozen=True, slots=True)
class CoverImage:
    """An uploaded file, read into memory but not yet validated.

    Attributes:
        filename:     Name as sent by the client (only its extension is kept).
        content_type: Media type declared by the client.
        content:      File bytes, truncated to MAX_IMAGE_BYTES + 1 so an
                      oversized upload is detectable without reading it all.
    """

    filename: str
    content_type: str
    content: bytes


class ImageStore(Protocol):
    """Somewhere to put accepted images."""

    async def store(self, content: bytes, suggested_name: str) -> str:
        """Persist content and return its relative path (e.g. /uploads/x.png)."""
        ...


class LocalImageStore:
    """Writes images into a content directory served under /uploads."""

    def __init__(
        self,
        directory: str | os.PathLike[str],
        url_prefix: str = UPLOADS_URL_PREFIX,
    ) -> None:
        self.directory = anyio.Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    async def store(self, content: bytes, suggested_name: str) -> str:
        await self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / suggested_name

        # "x" — never overwrite an existing upload
        async with await target.open("xb") as f:
            await f.write(content)

        logger.info("Stored cover image %s (%d bytes)", target, len(content))
        return f"{self.url_prefix}/{suggested_name}"


def generate_filename(original_filename: str) -> str:
    """
    Build a practically-unique name: project-<epoch ms>-<random><ext>.

    The millisecond timestamp plus a random number in [0, 10^9) makes
    collisions between concurrent uploads vanishingly unlikely without
    any coordination between requests.
    """
    extension = PurePath(original_filename).suffix.lower()
    millis = int(time.time() * 1000)
    return f"project-{millis}-{secrets.randbelow(10**9)}{extension}"


def validate_cover_image(image: CoverImage) -> None:
    """
    Check type first, then size.

    Raises:
        UploadValidationError: If the extension or media type is not an
            allowed image type, or the file exceeds MAX_IMAGE_BYTES.
    """
    extension = PurePath(image.filename).suffix.lower()
    media_type = image.content_type.split(";", maxsplit=1)[0].strip().lower()

    if extension not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_MEDIA_TYPES:
        raise UploadValidationError(INVALID_TYPE_MESSAGE)

    if len(image.content) > MAX_IMAGE_BYTES:
        raise UploadValidationError(TOO_LARGE_MESSAGE)


async def save_cover_image(image: CoverImage, store: ImageStore) -> str:
    """Validate image and hand it to store; returns the relative path."""
    validate_cover_image(image)
    return await store.store(image.content, generate_filename(image.filename))
