from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

MiniatureType = Literal["troop", "character"]
ProgressStatus = Literal["unpainted", "primed", "basecoated", "detailed", "completed"]

# transitions are unconstrained; new miniatures start here
DEFAULT_PROGRESS_STATUS: ProgressStatus = "unpainted"


class MiniatureCreateIn(BaseModel):
    name: str
    miniature_type: MiniatureType
    notes: Optional[str] = None


class MiniatureUpdateIn(BaseModel):
    name: Optional[str] = None
    progress_status: Optional[ProgressStatus] = None
    notes: Optional[str] = None


class MiniatureOut(BaseModel):
    id: int
    project_id: int
    name: str
    miniature_type: MiniatureType
    progress_status: ProgressStatus
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class MiniaturesListOut(BaseModel):
    miniatures: List[MiniatureOut]
