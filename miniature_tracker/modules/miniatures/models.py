from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel


class Miniature(SQLModel, table=True):
    __tablename__ = "miniatures"
    __table_args__ = (
        CheckConstraint("miniature_type IN ('troop', 'character')", name="ck_miniatures_type"),
        CheckConstraint(
            "progress_status IN ('unpainted', 'primed', 'basecoated', 'detailed', 'completed')",
            name="ck_miniatures_progress_status",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    # parent delete cascades (photos and recipe links follow)
    project_id: int = Field(
        sa_column=Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    name: str = Field(max_length=255)
    miniature_type: str = Field(max_length=20)
    progress_status: str = Field(max_length=50)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: str
    updated_at: str
