from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel


class MiniatureRecipe(SQLModel, table=True):
    __tablename__ = "miniature_recipes"
    __table_args__ = (UniqueConstraint("miniature_id", "recipe_id", name="uq_miniature_recipes_pair"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    miniature_id: int = Field(
        sa_column=Column(Integer, ForeignKey("miniatures.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    recipe_id: int = Field(
        sa_column=Column(Integer, ForeignKey("painting_recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    created_at: str
