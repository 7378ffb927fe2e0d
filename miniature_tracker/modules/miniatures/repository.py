from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine

from miniature_tracker.core.db import (
    delete_by_id,
    fetch_all,
    fetch_one,
    insert_returning_id,
    next_timestamp,
    update_by_id,
    utc_now,
)
from miniature_tracker.core.errors import InternalServerError

from .schemas import DEFAULT_PROGRESS_STATUS, MiniatureCreateIn, MiniatureOut

TABLE = "miniatures"
_COLUMNS = "id, project_id, name, miniature_type, progress_status, notes, created_at, updated_at"


def _row_to_miniature(row: Dict[str, Any]) -> MiniatureOut:
    return MiniatureOut(**row)


def create(engine: Engine, project_id: int, body: MiniatureCreateIn) -> MiniatureOut:
    """Raises IntegrityError if project_id does not exist."""
    now = utc_now()
    with engine.begin() as conn:
        new_id = insert_returning_id(
            conn,
            TABLE,
            {
                "project_id": project_id,
                "name": body.name,
                "miniature_type": body.miniature_type,
                "progress_status": DEFAULT_PROGRESS_STATUS,
                "notes": body.notes,
                "created_at": now,
                "updated_at": now,
            },
        )
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": new_id})
    if row is None:
        raise InternalServerError("Inserted row could not be read back")
    return _row_to_miniature(row)


def find_by_id(engine: Engine, miniature_id: int) -> Optional[MiniatureOut]:
    with engine.connect() as conn:
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": miniature_id})
    return _row_to_miniature(row) if row is not None else None


def find_by_project(engine: Engine, project_id: int) -> List[MiniatureOut]:
    with engine.connect() as conn:
        rows = fetch_all(
            conn,
            f"SELECT {_COLUMNS} FROM {TABLE} WHERE project_id = :pid ORDER BY created_at, id",
            {"pid": project_id},
        )
    return [_row_to_miniature(r) for r in rows]


def update(engine: Engine, miniature_id: int, fields: Dict[str, Any]) -> Optional[MiniatureOut]:
    current = find_by_id(engine, miniature_id)
    if current is None:
        return None

    # project_id and miniature_type are fixed after creation
    merged = current.model_dump(include={"name", "progress_status", "notes"})
    for k, v in fields.items():
        if k not in merged:
            continue
        # null means "keep current", same as omitted
        if v is None:
            continue
        merged[k] = v
    merged["updated_at"] = next_timestamp(current.updated_at)

    with engine.begin() as conn:
        if update_by_id(conn, TABLE, miniature_id, merged) == 0:
            return None
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": miniature_id})
    return _row_to_miniature(row) if row is not None else None


def delete(engine: Engine, miniature_id: int) -> bool:
    # photos and recipe links cascade; recipes themselves stay
    with engine.begin() as conn:
        return delete_by_id(conn, TABLE, miniature_id) > 0
