from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from miniature_tracker.modules.miniatures.schemas import MiniatureType


class RecipeCreateIn(BaseModel):
    name: str
    miniature_type: MiniatureType
    steps: List[str]
    paints_used: List[str] = Field(default_factory=list)
    techniques: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


# miniature_type is fixed at creation
class RecipeUpdateIn(BaseModel):
    name: Optional[str] = None
    steps: Optional[List[str]] = None
    paints_used: Optional[List[str]] = None
    techniques: Optional[List[str]] = None
    notes: Optional[str] = None


class RecipeOut(BaseModel):
    id: int
    name: str
    miniature_type: MiniatureType
    steps: List[str] = Field(default_factory=list)
    paints_used: List[str] = Field(default_factory=list)
    techniques: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class RecipesListOut(BaseModel):
    recipes: List[RecipeOut]
