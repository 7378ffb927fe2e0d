from __future__ import annotations

import os
from pathlib import Path

from .base import InvalidStorageKeyError, StorageBackendError, StorageNotFoundError, sanitize_key


class LocalStorage:
    """
    Filesystem-rooted storage:
    - keys map to files under `root` (parents created on store)
    - URLs are `base_url` + '/' + key
    """
    name = "local"

    def __init__(self, root: str, base_url: str) -> None:
        self.root = Path(root).resolve()
        self.base_url = base_url
        self.root.mkdir(parents=True, exist_ok=True)

    def _full_path(self, key: str) -> Path:
        p = (self.root / key).resolve()
        if p != self.root and not str(p).startswith(str(self.root) + os.sep):
            raise InvalidStorageKeyError(f"Invalid path: {key}")
        return p

    def store(self, data: bytes, key: str) -> str:
        safe = sanitize_key(key)
        path = self._full_path(safe)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageBackendError(f"IO error: {e}") from e
        return safe

    def retrieve(self, key: str) -> bytes:
        path = self._full_path(sanitize_key(key))
        if not path.is_file():
            raise StorageNotFoundError(key)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageBackendError(f"IO error: {e}") from e

    def delete(self, key: str) -> None:
        path = self._full_path(sanitize_key(key))
        if not path.is_file():
            raise StorageNotFoundError(key)
        try:
            path.unlink()
        except OSError as e:
            raise StorageBackendError(f"IO error: {e}") from e

    def exists(self, key: str) -> bool:
        return self._full_path(sanitize_key(key)).is_file()

    def get_url(self, key: str) -> str:
        return f"{self.base_url.rstrip('/')}/{sanitize_key(key)}"
