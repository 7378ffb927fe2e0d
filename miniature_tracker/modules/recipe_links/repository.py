"""
Miniature <-> recipe many-to-many links.

A link has no identity of its own beyond the (miniature_id, recipe_id) pair:
linking twice is a no-op, and deleting either side drops the link row only.
"""
from __future__ import annotations

from typing import List

from sqlalchemy import text
from sqlalchemy.engine import Engine

from miniature_tracker.core.db import fetch_all, utc_now
from miniature_tracker.modules.recipes.repository import row_to_recipe
from miniature_tracker.modules.recipes.schemas import RecipeOut

TABLE = "miniature_recipes"


def link(engine: Engine, miniature_id: int, recipe_id: int) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                f"INSERT INTO {TABLE} (miniature_id, recipe_id, created_at) "
                "VALUES (:mid, :rid, :ts) "
                "ON CONFLICT (miniature_id, recipe_id) DO NOTHING"
            ),
            {"mid": miniature_id, "rid": recipe_id, "ts": utc_now()},
        )


def unlink(engine: Engine, miniature_id: int, recipe_id: int) -> bool:
    with engine.begin() as conn:
        res = conn.execute(
            text(f"DELETE FROM {TABLE} WHERE miniature_id = :mid AND recipe_id = :rid"),
            {"mid": miniature_id, "rid": recipe_id},
        )
        return int(res.rowcount or 0) > 0


def find_recipes_for_miniature(engine: Engine, miniature_id: int) -> List[RecipeOut]:
    with engine.connect() as conn:
        rows = fetch_all(
            conn,
            """
            SELECT pr.id, pr.name, pr.miniature_type, pr.steps, pr.paints_used, pr.techniques,
                   pr.notes, pr.created_at, pr.updated_at
            FROM painting_recipes pr
            INNER JOIN miniature_recipes mr ON pr.id = mr.recipe_id
            WHERE mr.miniature_id = :mid
            ORDER BY pr.name, pr.id
            """,
            {"mid": miniature_id},
        )
    return [row_to_recipe(r) for r in rows]


def count_miniatures_for_recipe(engine: Engine, recipe_id: int) -> int:
    with engine.connect() as conn:
        c = conn.execute(
            text(f"SELECT COUNT(*) FROM {TABLE} WHERE recipe_id = :rid"),
            {"rid": recipe_id},
        ).scalar_one()
    return int(c)
