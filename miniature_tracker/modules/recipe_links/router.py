from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.engine import Engine

from miniature_tracker.core.db import get_engine
from miniature_tracker.core.errors import NotFound
from miniature_tracker.modules.miniatures import repository as miniatures_repo
from miniature_tracker.modules.recipes import repository as recipes_repo
from miniature_tracker.modules.recipes.schemas import RecipesListOut

from . import repository as links_repo
from .schemas import RecipeUsageOut

router = APIRouter(tags=["recipe_links"])


def _require_miniature(engine: Engine, miniature_id: int) -> None:
    if miniatures_repo.find_by_id(engine, miniature_id) is None:
        raise NotFound(f"Miniature with id {miniature_id} not found")


def _require_recipe(engine: Engine, recipe_id: int) -> None:
    if recipes_repo.find_by_id(engine, recipe_id) is None:
        raise NotFound(f"Recipe with id {recipe_id} not found")


@router.get("/miniatures/{miniature_id}/recipes", response_model=RecipesListOut)
def get_miniature_recipes(miniature_id: int, engine: Engine = Depends(get_engine)) -> RecipesListOut:
    _require_miniature(engine, miniature_id)
    return RecipesListOut(recipes=links_repo.find_recipes_for_miniature(engine, miniature_id))


@router.post("/miniatures/{miniature_id}/recipes/{recipe_id}", status_code=201)
def link_recipe(miniature_id: int, recipe_id: int, engine: Engine = Depends(get_engine)) -> Response:
    _require_miniature(engine, miniature_id)
    _require_recipe(engine, recipe_id)
    links_repo.link(engine, miniature_id, recipe_id)
    return Response(status_code=201)


@router.delete("/miniatures/{miniature_id}/recipes/{recipe_id}", status_code=204)
def unlink_recipe(miniature_id: int, recipe_id: int, engine: Engine = Depends(get_engine)) -> Response:
    if not links_repo.unlink(engine, miniature_id, recipe_id):
        raise NotFound(f"Recipe {recipe_id} is not linked to miniature {miniature_id}")
    return Response(status_code=204)


@router.get("/recipes/{recipe_id}/usage-count", response_model=RecipeUsageOut)
def recipe_usage_count(recipe_id: int, engine: Engine = Depends(get_engine)) -> RecipeUsageOut:
    _require_recipe(engine, recipe_id)
    return RecipeUsageOut(recipe_id=recipe_id, miniature_count=links_repo.count_miniatures_for_recipe(engine, recipe_id))
