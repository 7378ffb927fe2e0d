from __future__ import annotations

from typing import Protocol


class StorageError(Exception):
    """Base for every storage backend failure."""


class StorageNotFoundError(StorageError):
    def __init__(self, key: str) -> None:
        super().__init__(f"File not found: {key}")
        self.key = key


class InvalidStorageKeyError(StorageError):
    pass


class StorageBackendError(StorageError):
    """I/O or transport failure inside a backend."""


def sanitize_key(requested: str) -> str:
    """
    Normalize a requested key into a backend-safe relative key:
    backslashes become '/', '..', '.' and empty segments are dropped, so the
    result never starts with a separator and never climbs out of the root.
    """
    parts = [p for p in requested.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    key = "/".join(parts)
    if not key:
        raise InvalidStorageKeyError("Empty path after sanitization")
    return key


class StorageBackend(Protocol):
    """
    Byte payloads addressed by a string key. Keys are sanitized by every
    operation; `store` returns the key actually used.
    """
    name: str

    def store(self, data: bytes, key: str) -> str:
        ...

    def retrieve(self, key: str) -> bytes:
        ...

    def delete(self, key: str) -> None:
        ...

    def exists(self, key: str) -> bool:
        ...

    def get_url(self, key: str) -> str:
        ...
