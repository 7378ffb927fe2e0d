"""
Process configuration, read from the environment.

Defaults:
- DATABASE_URL: sqlite:///./data/miniature_tracker.db
- STORAGE_TYPE: local (LOCAL_STORAGE_PATH=./uploads)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_DATABASE_URL = "sqlite:///./data/miniature_tracker.db"


class ConfigError(ValueError):
    pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _env_flag(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() not in ("0", "false", "no", "")


def normalize_database_url(url: str) -> str:
    """
    Accepts the URL shapes found in deployment env files:
      sqlite:./x.db            -> sqlite:///./x.db
      sqlite://x.db            -> sqlite:///x.db
      postgres://...           -> postgresql://...
    """
    if url.startswith("sqlite:") and not url.startswith("sqlite:///"):
        rest = url[len("sqlite:") :].lstrip("/")
        return "sqlite:///" + rest
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://") :]
    if url.startswith("sqlite:///") or url.startswith("postgresql"):
        return url
    raise ConfigError("Unsupported database URL format. Use 'sqlite:' or 'postgres://'")


@dataclass(frozen=True)
class Settings:
    app_version: str = "0.1.0"
    database_url: str = DEFAULT_DATABASE_URL
    db_pool_size: int = 10
    db_pool_timeout: int = 3
    db_pool_recycle: int = 1800
    auto_create_schema: bool = True

    port: int = 3000
    storage_type: str = "local"  # local|s3
    local_storage_path: str = "./uploads"
    public_base_url: Optional[str] = None
    s3_bucket: Optional[str] = None
    aws_region: Optional[str] = None
    s3_base_url: Optional[str] = None

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        storage_type = (os.getenv("STORAGE_TYPE") or "local").strip().lower()
        if storage_type not in ("local", "s3"):
            storage_type = "local"

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            app_version=os.getenv("APP_VERSION", "0.1.0"),
            database_url=normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)),
            db_pool_size=_env_int("DB_POOL_SIZE", 10),
            db_pool_timeout=_env_int("DB_POOL_TIMEOUT", 3),
            db_pool_recycle=_env_int("DB_POOL_RECYCLE", 1800),
            auto_create_schema=_env_flag("AUTO_CREATE_SCHEMA", True),
            port=_env_int("PORT", 3000),
            storage_type=storage_type,
            local_storage_path=os.getenv("LOCAL_STORAGE_PATH") or "./uploads",
            public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
            s3_bucket=os.getenv("S3_BUCKET") or None,
            aws_region=os.getenv("AWS_REGION") or None,
            s3_base_url=os.getenv("S3_BASE_URL") or None,
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def local_base_url(self) -> str:
        base = self.public_base_url or f"http://localhost:{self.port}"
        return base.rstrip("/") + "/uploads"
