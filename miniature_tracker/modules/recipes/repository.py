from __future__ import annotations

import json
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
from miniature_tracker.core.observability import emit

from .schemas import RecipeCreateIn, RecipeOut

TABLE = "painting_recipes"
COLUMNS = "id, name, miniature_type, steps, paints_used, techniques, notes, created_at, updated_at"
_SEQUENCE_FIELDS = ("steps", "paints_used", "techniques")


def encode_sequence(values: List[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def decode_sequence(raw: Any, *, recipe_id: Any = None, column: str = "") -> List[str]:
    """
    Stored JSON array -> list of strings.
    Anything unreadable decodes to [] (a warning event records the loss).
    """
    if raw is None or raw == "":
        return []
    try:
        v = json.loads(raw)
    except (TypeError, ValueError) as e:
        emit("warning", "recipe.decode_failed", str(e), None, __name__, recipe_id=recipe_id, column=column)
        return []
    if not isinstance(v, list):
        emit("warning", "recipe.decode_failed", "not a JSON array", None, __name__, recipe_id=recipe_id, column=column)
        return []
    return [str(x) for x in v]


def row_to_recipe(row: Dict[str, Any]) -> RecipeOut:
    d = dict(row)
    for col in _SEQUENCE_FIELDS:
        d[col] = decode_sequence(d.get(col), recipe_id=d.get("id"), column=col)
    return RecipeOut(**d)


def create(engine: Engine, body: RecipeCreateIn) -> RecipeOut:
    now = utc_now()
    with engine.begin() as conn:
        new_id = insert_returning_id(
            conn,
            TABLE,
            {
                "name": body.name,
                "miniature_type": body.miniature_type,
                "steps": encode_sequence(body.steps),
                "paints_used": encode_sequence(body.paints_used),
                "techniques": encode_sequence(body.techniques),
                "notes": body.notes,
                "created_at": now,
                "updated_at": now,
            },
        )
        row = fetch_one(conn, f"SELECT {COLUMNS} FROM {TABLE} WHERE id = :id", {"id": new_id})
    if row is None:
        raise InternalServerError("Inserted row could not be read back")
    return row_to_recipe(row)


def find_by_id(engine: Engine, recipe_id: int) -> Optional[RecipeOut]:
    with engine.connect() as conn:
        row = fetch_one(conn, f"SELECT {COLUMNS} FROM {TABLE} WHERE id = :id", {"id": recipe_id})
    return row_to_recipe(row) if row is not None else None


def find_all(engine: Engine) -> List[RecipeOut]:
    with engine.connect() as conn:
        rows = fetch_all(conn, f"SELECT {COLUMNS} FROM {TABLE} ORDER BY name, id")
    return [row_to_recipe(r) for r in rows]


def find_by_type(engine: Engine, miniature_type: str) -> List[RecipeOut]:
    with engine.connect() as conn:
        rows = fetch_all(
            conn,
            f"SELECT {COLUMNS} FROM {TABLE} WHERE miniature_type = :t ORDER BY name, id",
            {"t": miniature_type},
        )
    return [row_to_recipe(r) for r in rows]


def update(engine: Engine, recipe_id: int, fields: Dict[str, Any]) -> Optional[RecipeOut]:
    current = find_by_id(engine, recipe_id)
    if current is None:
        return None

    merged = current.model_dump(include={"name", "steps", "paints_used", "techniques", "notes"})
    for k, v in fields.items():
        if k not in merged:
            continue
        # null means "keep current", same as omitted
        if v is None:
            continue
        merged[k] = v
    for col in _SEQUENCE_FIELDS:
        merged[col] = encode_sequence(merged[col])
    merged["updated_at"] = next_timestamp(current.updated_at)

    with engine.begin() as conn:
        if update_by_id(conn, TABLE, recipe_id, merged) == 0:
            return None
        row = fetch_one(conn, f"SELECT {COLUMNS} FROM {TABLE} WHERE id = :id", {"id": recipe_id})
    return row_to_recipe(row) if row is not None else None


def delete(engine: Engine, recipe_id: int) -> bool:
    # only link rows cascade; linked miniatures stay
    with engine.begin() as conn:
        return delete_by_id(conn, TABLE, recipe_id) > 0
