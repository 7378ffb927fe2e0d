from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

THIS = Path(__file__).resolve()
REPO_ROOT = THIS.parents[1]
sys.path.insert(0, str(REPO_ROOT))

from miniature_tracker.core.config import DEFAULT_DATABASE_URL, normalize_database_url  # noqa: E402
from miniature_tracker.core.db import resolve_sqlite_path  # noqa: E402
from miniature_tracker.modules.miniatures import models as _miniatures  # noqa: E402,F401
from miniature_tracker.modules.photos import models as _photos  # noqa: E402,F401
from miniature_tracker.modules.projects import models as _projects  # noqa: E402,F401
from miniature_tracker.modules.recipe_links import models as _links  # noqa: E402,F401
from miniature_tracker.modules.recipes import models as _recipes  # noqa: E402,F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def get_url() -> str:
    url = normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))
    sp = resolve_sqlite_path(url)
    if sp is None:
        return url
    sp.parent.mkdir(parents=True, exist_ok=True)
    return "sqlite:///" + sp.as_posix()


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        if connection.dialect.name == "sqlite":
            connection.exec_driver_sql("PRAGMA foreign_keys=ON")
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
