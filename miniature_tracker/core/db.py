"""
DB utilities shared by every repository module.

One SQLAlchemy engine per process (sqlite file/memory or postgres), created
in the app lifespan and handed to repositories explicitly. Queries are plain
`text()` with named parameters, so the same SQL runs on both dialects; the
only dialect difference handled here is RETURNING vs. lastrowid.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import QueuePool, StaticPool

from .config import Settings
from .observability import emit, mask_url


def resolve_sqlite_path(database_url: str) -> Optional[Path]:
    if not database_url.startswith("sqlite:///"):
        return None
    p = database_url[len("sqlite:///") :].split("?", 1)[0]
    if p in ("", ":memory:"):
        return None

    # absolute unix
    if p.startswith("/"):
        return Path(p)

    # absolute windows drive, both C:/ and C:\ forms
    if len(p) >= 3 and p[1] == ":" and (p[2] == "/" or p[2] == "\\"):
        return Path(p)

    # relative -> working directory
    return Path(p).resolve()


def _sqlite_pragmas(dbapi_conn: Any, _record: Any) -> None:
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.execute("PRAGMA busy_timeout=5000")
    cur.close()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url
    kwargs: Dict[str, Any] = {"future": True, "pool_pre_ping": True}
    pooled = {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": 0,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
    }

    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        sp = resolve_sqlite_path(url)
        if sp is None:
            # in-memory: every checkout must see the same database
            kwargs["poolclass"] = StaticPool
        else:
            sp.parent.mkdir(parents=True, exist_ok=True)
            url = "sqlite:///" + sp.as_posix()
            kwargs.update(pooled)
    else:
        kwargs.update(pooled)

    engine = create_engine(url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _sqlite_pragmas)

    emit("info", "db.engine.created", f"engine ready for {mask_url(url)}", None, __name__, dialect=engine.dialect.name)
    return engine


def init_schema(engine: Engine) -> None:
    from sqlmodel import SQLModel

    # registers every table on SQLModel.metadata
    from miniature_tracker.modules.miniatures import models as _miniatures  # noqa: F401
    from miniature_tracker.modules.photos import models as _photos  # noqa: F401
    from miniature_tracker.modules.projects import models as _projects  # noqa: F401
    from miniature_tracker.modules.recipe_links import models as _links  # noqa: F401
    from miniature_tracker.modules.recipes import models as _recipes  # noqa: F401

    SQLModel.metadata.create_all(engine)
    emit("info", "db.schema.created", "tables ensured", None, __name__, tables=sorted(SQLModel.metadata.tables))


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def db_health(engine: Engine) -> Dict[str, Any]:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "dialect": engine.dialect.name}
    except Exception as e:
        return {"status": "error", "dialect": engine.dialect.name, "error": str(e)}


# --- timestamps ---
def format_ts(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_ts(value: str) -> datetime:
    dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def utc_now() -> str:
    return format_ts(datetime.now(timezone.utc))


def next_timestamp(previous: Optional[str]) -> str:
    """A timestamp strictly later than `previous`, even within one clock tick."""
    now = datetime.now(timezone.utc)
    if previous:
        prev = parse_ts(previous)
        if now <= prev:
            now = prev + timedelta(microseconds=1)
    return format_ts(now)


# --- query helpers ---
def fetch_one(conn: Connection, sql: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    row = conn.execute(text(sql), params or {}).mappings().first()
    return dict(row) if row is not None else None


def fetch_all(conn: Connection, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    return [dict(r) for r in conn.execute(text(sql), params or {}).mappings().all()]


def insert_returning_id(conn: Connection, table: str, values: Dict[str, Any]) -> int:
    keys = sorted(values)
    sql = f"INSERT INTO {table} ({', '.join(keys)}) VALUES ({', '.join(':' + k for k in keys)})"
    if conn.dialect.insert_returning:
        return int(conn.execute(text(sql + " RETURNING id"), values).scalar_one())

    # fallback: lastrowid for integer PKs
    cur = conn.execute(text(sql), values)
    return int(cur.lastrowid)


def update_by_id(conn: Connection, table: str, row_id: int, values: Dict[str, Any]) -> int:
    keys = sorted(values)
    assignments = ", ".join(f"{k} = :{k}" for k in keys)
    params = dict(values)
    params["pk"] = row_id
    res = conn.execute(text(f"UPDATE {table} SET {assignments} WHERE id = :pk"), params)
    return int(res.rowcount or 0)


def delete_by_id(conn: Connection, table: str, row_id: int) -> int:
    res = conn.execute(text(f"DELETE FROM {table} WHERE id = :pk"), {"pk": row_id})
    return int(res.rowcount or 0)
