from __future__ import annotations

from pydantic import BaseModel


class RecipeUsageOut(BaseModel):
    recipe_id: int
    miniature_count: int
