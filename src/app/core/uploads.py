"""
File Uploads

Validation and local-disk storage for multipart uploads. Files are renamed
to `<timestamp>-<random hex><ext>`; the client's filename is kept only as
metadata.
"""

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from app.core.config import settings
from app.core.errors import ValidationFailedError

logger = logging.getLogger(__name__)

DOCUMENT_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/jpeg",
        "image/png",
        "image/gif",
    }
)
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png", ".gif"})

IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})
MAX_IMAGE_SIZE = 5 * 1024 * 1024


@dataclass
class StoredFile:
    filename: str
    original_name: str
    content_type: str
    size: int
    url: str


class InvalidFileTypeError(ValidationFailedError):
    def __init__(self, allowed: frozenset[str]):
        super().__init__(
            message=f"Invalid file type. Allowed: {', '.join(sorted(allowed))}",
            error_code="INVALID_FILE_TYPE",
        )


class FileTooLargeError(ValidationFailedError):
    def __init__(self, max_size: int):
        super().__init__(
            message=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB",
            error_code="FILE_TOO_LARGE",
        )


def generate_filename(original_name: str) -> str:
    ext = Path(original_name).suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{ext}"


def validate_upload(
    file: UploadFile,
    content: bytes,
    content_types: frozenset[str],
    extensions: frozenset[str],
    max_size: int,
) -> None:
    """
    Check MIME type, extension and size.

    Raises:
        InvalidFileTypeError: MIME type or extension not allowed
        FileTooLargeError: content exceeds max_size
    """
    ext = Path(file.filename or "").suffix.lower()
    if file.content_type not in content_types or ext not in extensions:
        raise InvalidFileTypeError(extensions)
    if len(content) > max_size:
        raise FileTooLargeError(max_size)
    if not content:
        raise ValidationFailedError("Uploaded file is empty.", "EMPTY_FILE")


async def save_upload(
    file: UploadFile,
    subdir: str,
    content_types: frozenset[str] = DOCUMENT_CONTENT_TYPES,
    extensions: frozenset[str] = DOCUMENT_EXTENSIONS,
    max_size: int | None = None,
) -> StoredFile:
    """Validate an upload and write it under `settings.upload_dir/<subdir>`."""
    limit = max_size or settings.max_upload_size_bytes
    # Read one byte past the limit so oversize files are detected without buffering them whole
    content = await file.read(limit + 1)
    validate_upload(file, content, content_types, extensions, limit)

    filename = generate_filename(file.filename or "upload")
    directory = Path(settings.upload_dir) / subdir
    path = directory / filename

    def _write() -> None:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    await asyncio.to_thread(_write)
    logger.info(f"Stored upload {subdir}/{filename} ({len(content)} bytes)")

    return StoredFile(
        filename=filename,
        original_name=file.filename or filename,
        content_type=file.content_type or "application/octet-stream",
        size=len(content),
        url=f"/uploads/{subdir}/{filename}",
    )


async def delete_upload(url: str) -> None:
    """Remove a stored file given its public `/uploads/...` URL."""
    relative = url.removeprefix("/uploads/")
    path = Path(settings.upload_dir) / relative

    def _unlink() -> None:
        path.unlink(missing_ok=True)

    await asyncio.to_thread(_unlink)
