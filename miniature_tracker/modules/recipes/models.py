from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Column, Text
from sqlmodel import Field, SQLModel


class PaintingRecipe(SQLModel, table=True):
    __tablename__ = "painting_recipes"
    __table_args__ = (
        CheckConstraint("miniature_type IN ('troop', 'character')", name="ck_recipes_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    miniature_type: str = Field(max_length=20, index=True)

    # JSON arrays of strings
    steps: str = Field(sa_column=Column(Text, nullable=False))
    paints_used: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    techniques: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: str
    updated_at: str
