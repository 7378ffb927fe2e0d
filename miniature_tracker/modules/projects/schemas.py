from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

GameSystem = Literal["age_of_sigmar", "horus_heresy", "warhammer_40k"]


class ProjectCreateIn(BaseModel):
    name: str
    game_system: GameSystem
    army: str
    description: Optional[str] = None


class ProjectUpdateIn(BaseModel):
    name: Optional[str] = None
    game_system: Optional[GameSystem] = None
    army: Optional[str] = None
    description: Optional[str] = None


class ProjectOut(BaseModel):
    id: int
    name: str
    game_system: GameSystem
    army: str
    description: Optional[str] = None
    created_at: str
    updated_at: str


class ProjectsListOut(BaseModel):
    projects: List[ProjectOut]
