from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import StorageBackendError, StorageNotFoundError, sanitize_key

# presigned GET lifetime
URL_EXPIRES_IN = 3600

_MISSING_CODES = {"NoSuchKey", "NotFound", "404"}


def _is_missing(err: ClientError) -> bool:
    code = str(err.response.get("Error", {}).get("Code", ""))
    return code in _MISSING_CODES


class S3Storage:
    """
    Object storage in one bucket. URLs come from `base_url` (e.g. a CDN) when
    configured, otherwise from a one-hour presigned GET.
    """
    name = "s3"

    def __init__(self, bucket: str, region: str, base_url: Optional[str] = None, client: Any = None) -> None:
        self.bucket = bucket
        self.region = region
        self.base_url = base_url
        self.client = client or boto3.client("s3", region_name=region)

    def store(self, data: bytes, key: str) -> str:
        k = sanitize_key(key)
        try:
            self.client.put_object(Bucket=self.bucket, Key=k, Body=data)
        except (BotoCoreError, ClientError) as e:
            raise StorageBackendError(f"Failed to upload to S3: {e}") from e
        return k

    def retrieve(self, key: str) -> bytes:
        k = sanitize_key(key)
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=k)
            return resp["Body"].read()
        except ClientError as e:
            if _is_missing(e):
                raise StorageNotFoundError(key) from e
            raise StorageBackendError(f"Failed to retrieve from S3: {e}") from e
        except BotoCoreError as e:
            raise StorageBackendError(f"Failed to retrieve from S3: {e}") from e

    def delete(self, key: str) -> None:
        k = sanitize_key(key)
        # S3 deletes are silent on absent keys; check first so absence is reported
        if not self.exists(k):
            raise StorageNotFoundError(key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=k)
        except (BotoCoreError, ClientError) as e:
            raise StorageBackendError(f"Failed to delete from S3: {e}") from e

    def exists(self, key: str) -> bool:
        k = sanitize_key(key)
        try:
            self.client.head_object(Bucket=self.bucket, Key=k)
            return True
        except ClientError as e:
            if _is_missing(e):
                return False
            raise StorageBackendError(f"Failed to check S3 object existence: {e}") from e
        except BotoCoreError as e:
            raise StorageBackendError(f"Failed to check S3 object existence: {e}") from e

    def get_url(self, key: str) -> str:
        k = sanitize_key(key)
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{k}"
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": k},
                ExpiresIn=URL_EXPIRES_IN,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageBackendError(f"Failed to create presigned URL: {e}") from e
