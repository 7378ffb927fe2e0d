from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Column, Text
from sqlmodel import Field, SQLModel


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "game_system IN ('age_of_sigmar', 'horus_heresy', 'warhammer_40k')",
            name="ck_projects_game_system",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    game_system: str = Field(max_length=50, index=True)  # age_of_sigmar|horus_heresy|warhammer_40k
    army: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: str
    updated_at: str
