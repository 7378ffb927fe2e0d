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

from .schemas import ProjectCreateIn, ProjectOut

TABLE = "projects"
_COLUMNS = "id, name, game_system, army, description, created_at, updated_at"


def _row_to_project(row: Dict[str, Any]) -> ProjectOut:
    return ProjectOut(**row)


def create(engine: Engine, body: ProjectCreateIn) -> ProjectOut:
    now = utc_now()
    with engine.begin() as conn:
        new_id = insert_returning_id(
            conn,
            TABLE,
            {
                "name": body.name,
                "game_system": body.game_system,
                "army": body.army,
                "description": body.description,
                "created_at": now,
                "updated_at": now,
            },
        )
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": new_id})
    if row is None:
        raise InternalServerError("Inserted row could not be read back")
    return _row_to_project(row)


def find_by_id(engine: Engine, project_id: int) -> Optional[ProjectOut]:
    with engine.connect() as conn:
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": project_id})
    return _row_to_project(row) if row is not None else None


def find_all(engine: Engine) -> List[ProjectOut]:
    with engine.connect() as conn:
        rows = fetch_all(conn, f"SELECT {_COLUMNS} FROM {TABLE} ORDER BY game_system, army, name, id")
    return [_row_to_project(r) for r in rows]


def update(engine: Engine, project_id: int, fields: Dict[str, Any]) -> Optional[ProjectOut]:
    """
    Partial update: `fields` holds only what the client sent.
    Read-modify-write without a lock; concurrent writers may overwrite each other.
    """
    current = find_by_id(engine, project_id)
    if current is None:
        return None

    merged = current.model_dump(exclude={"id", "created_at", "updated_at"})
    for k, v in fields.items():
        if k not in merged:
            continue
        # null means "keep current", same as omitted
        if v is None:
            continue
        merged[k] = v
    merged["updated_at"] = next_timestamp(current.updated_at)

    with engine.begin() as conn:
        if update_by_id(conn, TABLE, project_id, merged) == 0:
            return None
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": project_id})
    return _row_to_project(row) if row is not None else None


def delete(engine: Engine, project_id: int) -> bool:
    # miniatures, their photos and recipe links go with it (FK cascade)
    with engine.begin() as conn:
        return delete_by_id(conn, TABLE, project_id) > 0
