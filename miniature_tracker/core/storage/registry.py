from __future__ import annotations

from fastapi import Request

from miniature_tracker.core.config import ConfigError, Settings
from miniature_tracker.core.observability import emit

from .base import StorageBackend
from .local import LocalStorage


def get_storage(settings: Settings) -> StorageBackend:
    """
    Backend selected by STORAGE_TYPE:
      local -> LOCAL_STORAGE_PATH, URLs under {PUBLIC_BASE_URL}/uploads
      s3    -> S3_BUCKET + AWS_REGION (S3_BASE_URL optional)
    """
    if settings.storage_type == "s3":
        if not settings.s3_bucket:
            raise ConfigError("S3_BUCKET not configured")
        if not settings.aws_region:
            raise ConfigError("AWS_REGION not configured")
        from .s3 import S3Storage

        backend: StorageBackend = S3Storage(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            base_url=settings.s3_base_url,
        )
    else:
        backend = LocalStorage(settings.local_storage_path, settings.local_base_url)

    emit("info", "storage.backend.selected", f"storage backend: {backend.name}", None, __name__)
    return backend


def get_storage_dep(request: Request) -> StorageBackend:
    return request.app.state.storage
