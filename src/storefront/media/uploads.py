"""Validation and naming of uploaded product images."""

import random
import time
from dataclasses import dataclass
from pathlib import PurePath

from fastapi import UploadFile
from protean.exceptions import ValidationError

from storefront.config import get_settings
from storefront.media.storage import get_storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpg", "image/jpeg", "image/png", "image/webp"}


@dataclass(frozen=True)
class IncomingFile:
    field: str
    filename: str
    content_type: str
    data: bytes


async def read_upload(field: str, file: UploadFile) -> IncomingFile:
    """Read at most one byte past the size limit; `validate_image` rejects anything longer."""
    return IncomingFile(
        field=field,
        filename=file.filename or "",
        content_type=(file.content_type or "").lower(),
        data=await file.read(get_settings().max_upload_bytes + 1),
    )


def extension_of(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def validate_image(upload: IncomingFile) -> None:
    if extension_of(upload.filename) not in ALLOWED_EXTENSIONS or upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError({upload.field: ["Images only!"]})

    limit = get_settings().max_upload_bytes
    if len(upload.data) > limit:
        raise ValidationError({upload.field: [f"File too large. Maximum size is {limit // (1024 * 1024)}MB"]})


def stored_name(field: str, filename: str) -> str:
    """`{field}-{epoch_ms}-{random}{ext}`, e.g. `image-1718000000000-482913377.png`."""
    return f"{field}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{extension_of(filename)}"


def store_images(uploads: list[IncomingFile], max_files: int | None = None) -> list[str]:
    """Validate every file first, then store them all. Returns their URLs."""
    if not uploads:
        raise ValidationError({"image": ["No file uploaded"]})

    limit = max_files or get_settings().max_upload_files
    if len(uploads) > limit:
        raise ValidationError({uploads[0].field: [f"At most {limit} files per upload"]})

    for upload in uploads:
        validate_image(upload)

    storage = get_storage()
    urls = [storage.save(stored_name(u.field, u.filename), u.data, u.content_type) for u in uploads]
    logger.info("Images uploaded", count=len(urls))
    return urls
