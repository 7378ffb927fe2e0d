"""
Photo upload gate, storage key policy and best-effort byte cleanup.

Gate (checked before storage or DB are touched):
- content type exactly image/jpeg | image/png | image/webp
- at most MAX_FILE_SIZE bytes (inclusive)
- file field, filename and declared content type all present
"""
from __future__ import annotations

import uuid
from pathlib import PurePosixPath
from typing import Iterable, Optional

from miniature_tracker.core.errors import ValidationError
from miniature_tracker.core.observability import emit
from miniature_tracker.core.storage.base import StorageBackend, StorageError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")
DEFAULT_EXTENSION = "jpg"


def check_content_type(mime_type: Optional[str]) -> str:
    if not mime_type:
        raise ValidationError("No MIME type provided", error_type="missing_mime_type")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            f"Unsupported file type: {mime_type}. Allowed types: {', '.join(ALLOWED_MIME_TYPES)}",
            error_type="invalid_file_type",
        )
    return mime_type


def check_size(size: int) -> None:
    if size > MAX_FILE_SIZE:
        raise ValidationError(
            f"File size {size} bytes exceeds maximum allowed size of {MAX_FILE_SIZE} bytes",
            error_type="file_too_large",
        )


def check_filename(filename: Optional[str]) -> str:
    if not filename:
        raise ValidationError("No filename provided", error_type="missing_filename")
    return filename


def photo_storage_key(miniature_id: int, filename: str) -> str:
    """miniatures/{miniature_id}/{uuid4}_{stem}.{ext}; ext defaults to jpg."""
    name = PurePosixPath(filename.replace("\\", "/")).name or filename
    suffix = PurePosixPath(name).suffix
    if suffix and len(suffix) > 1:
        ext = suffix[1:]
        stem = name[: -len(suffix)]
    else:
        ext = DEFAULT_EXTENSION
        stem = name
    return f"miniatures/{miniature_id}/{uuid.uuid4()}_{stem}.{ext}"


def store_photo(storage: StorageBackend, data: bytes, filename: str, miniature_id: int) -> str:
    key = storage.store(data, photo_storage_key(miniature_id, filename))
    emit("info", "photo.stored", f"stored {len(data)} bytes", None, __name__, key=key, miniature_id=miniature_id)
    return key


def discard_stored(storage: StorageBackend, keys: Iterable[str], request_id: Optional[str] = None) -> int:
    """
    Delete stored bytes whose rows are already gone. Failures are logged and
    skipped: an orphaned object may remain. Returns how many were removed.
    """
    removed = 0
    for key in keys:
        try:
            storage.delete(key)
            removed += 1
        except StorageError as e:
            emit(
                "warning",
                "photo.storage_delete_failed",
                f"Failed to delete photo file {key}: {e}",
                request_id,
                __name__,
                key=key,
            )
    return removed
