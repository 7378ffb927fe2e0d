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

from . import repository as projects_repo
from .schemas import ProjectCreateIn, ProjectOut, ProjectsListOut, ProjectUpdateIn

router = APIRouter(tags=["projects"])


@router.get("/projects", response_model=ProjectsListOut)
def list_projects(engine: Engine = Depends(get_engine)) -> ProjectsListOut:
    return ProjectsListOut(projects=projects_repo.find_all(engine))


@router.post("/projects", response_model=ProjectOut)
def create_project(body: ProjectCreateIn, engine: Engine = Depends(get_engine)) -> ProjectOut:
    require_name(body.name, "Project name is required")
    require_name(body.army, "Army is required")
    return projects_repo.create(engine, body)


@router.get("/projects/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, engine: Engine = Depends(get_engine)) -> ProjectOut:
    p = projects_repo.find_by_id(engine, project_id)
    if p is None:
        raise NotFound(f"Project with id {project_id} not found")
    return p


@router.put("/projects/{project_id}", response_model=ProjectOut)
def update_project(project_id: int, body: ProjectUpdateIn, engine: Engine = Depends(get_engine)) -> ProjectOut:
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is not None:
        require_name(fields["name"], "Project name cannot be empty")
    if fields.get("army") is not None:
        require_name(fields["army"], "Army cannot be empty")

    p = projects_repo.update(engine, project_id, fields)
    if p is None:
        raise NotFound(f"Project with id {project_id} not found")
    return p


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(
    project_id: int,
    request: Request,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> Response:
    # keys first: the cascade removes the rows that point at the bytes
    keys = [ph.file_path for ph in photos_repo.find_by_project(engine, project_id)]
    if not projects_repo.delete(engine, project_id):
        raise NotFound(f"Project with id {project_id} not found")

    discard_stored(storage, keys, getattr(request.state, "request_id", None))
    return Response(status_code=204)
