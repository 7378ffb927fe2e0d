from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.engine import Engine

from miniature_tracker.core.db import get_engine
from miniature_tracker.core.errors import NotFound
from miniature_tracker.core.storage.base import StorageBackend
from miniature_tracker.core.storage.registry import get_storage_dep
from miniature_tracker.core.validation import require_name
from miniature_tracker.modules.photos import repository as photos_repo
from miniature_tracker.modules.photos.service import discard_stored
from miniature_tracker.modules.projects import repository as projects_repo

from . import repository as miniatures_repo
from .schemas import MiniatureCreateIn, MiniatureOut, MiniaturesListOut, MiniatureUpdateIn

router = APIRouter(tags=["miniatures"])


def _require_project(engine: Engine, project_id: int) -> None:
    if projects_repo.find_by_id(engine, project_id) is None:
        raise NotFound(f"Project with id {project_id} not found")


@router.get("/projects/{project_id}/miniatures", response_model=MiniaturesListOut)
def list_miniatures(project_id: int, engine: Engine = Depends(get_engine)) -> MiniaturesListOut:
    _require_project(engine, project_id)
    return MiniaturesListOut(miniatures=miniatures_repo.find_by_project(engine, project_id))


@router.post("/projects/{project_id}/miniatures", response_model=MiniatureOut)
def create_miniature(
    project_id: int,
    body: MiniatureCreateIn,
    engine: Engine = Depends(get_engine),
) -> MiniatureOut:
    require_name(body.name, "Miniature name is required")
    _require_project(engine, project_id)
    return miniatures_repo.create(engine, project_id, body)


@router.get("/miniatures/{miniature_id}", response_model=MiniatureOut)
def get_miniature(miniature_id: int, engine: Engine = Depends(get_engine)) -> MiniatureOut:
    m = miniatures_repo.find_by_id(engine, miniature_id)
    if m is None:
        raise NotFound(f"Miniature with id {miniature_id} not found")
    return m


@router.put("/miniatures/{miniature_id}", response_model=MiniatureOut)
def update_miniature(
    miniature_id: int,
    body: MiniatureUpdateIn,
    engine: Engine = Depends(get_engine),
) -> MiniatureOut:
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is not None:
        require_name(fields["name"], "Miniature name cannot be empty")

    m = miniatures_repo.update(engine, miniature_id, fields)
    if m is None:
        raise NotFound(f"Miniature with id {miniature_id} not found")
    return m


@router.delete("/miniatures/{miniature_id}", status_code=204)
def delete_miniature(
    miniature_id: int,
    request: Request,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> Response:
    # photo rows go first so their storage keys are known
    keys = [ph.file_path for ph in photos_repo.delete_by_miniature(engine, miniature_id)]
    if not miniatures_repo.delete(engine, miniature_id):
        raise NotFound(f"Miniature with id {miniature_id} not found")

    discard_stored(storage, keys, getattr(request.state, "request_id", None))
    return Response(status_code=204)
