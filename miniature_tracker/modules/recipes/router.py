from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.engine import Engine

from miniature_tracker.core.db import get_engine
from miniature_tracker.core.errors import NotFound
from miniature_tracker.core.validation import require_non_blank
from miniature_tracker.modules.miniatures.schemas import MiniatureType

from . import repository as recipes_repo
from .schemas import RecipeCreateIn, RecipeOut, RecipesListOut, RecipeUpdateIn

router = APIRouter(tags=["recipes"])


@router.get("/recipes", response_model=RecipesListOut)
def list_recipes(
    miniature_type: Optional[MiniatureType] = Query(None, alias="type", description="troop|character"),
    engine: Engine = Depends(get_engine),
) -> RecipesListOut:
    if miniature_type is None:
        return RecipesListOut(recipes=recipes_repo.find_all(engine))
    return RecipesListOut(recipes=recipes_repo.find_by_type(engine, miniature_type))


@router.post("/recipes", response_model=RecipeOut)
def create_recipe(body: RecipeCreateIn, engine: Engine = Depends(get_engine)) -> RecipeOut:
    require_non_blank(body.name, "Recipe name is required")
    return recipes_repo.create(engine, body)


@router.get("/recipes/{recipe_id}", response_model=RecipeOut)
def get_recipe(recipe_id: int, engine: Engine = Depends(get_engine)) -> RecipeOut:
    r = recipes_repo.find_by_id(engine, recipe_id)
    if r is None:
        raise NotFound(f"Recipe with id {recipe_id} not found")
    return r


@router.put("/recipes/{recipe_id}", response_model=RecipeOut)
def update_recipe(recipe_id: int, body: RecipeUpdateIn, engine: Engine = Depends(get_engine)) -> RecipeOut:
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is not None:
        require_non_blank(fields["name"], "Recipe name cannot be empty")

    r = recipes_repo.update(engine, recipe_id, fields)
    if r is None:
        raise NotFound(f"Recipe with id {recipe_id} not found")
    return r


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(recipe_id: int, engine: Engine = Depends(get_engine)) -> Response:
    if not recipes_repo.delete(engine, recipe_id):
        raise NotFound(f"Recipe with id {recipe_id} not found")
    return Response(status_code=204)
