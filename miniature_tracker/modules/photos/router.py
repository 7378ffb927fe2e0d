from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.engine import Engine
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from miniature_tracker.core.db import get_engine
from miniature_tracker.core.errors import AppError, NotFound, ValidationError
from miniature_tracker.core.observability import emit
from miniature_tracker.core.storage.base import StorageBackend, StorageError, StorageNotFoundError
from miniature_tracker.core.storage.registry import get_storage_dep
from miniature_tracker.modules.miniatures import repository as miniatures_repo

from . import repository as photos_repo
from .schemas import PhotoOut, PhotoUrlOut
from .service import MAX_FILE_SIZE, check_content_type, check_filename, check_size, discard_stored, store_photo

router = APIRouter(tags=["photos"])

PHOTO_FIELD = "photo"


class StorageFailure(AppError):
    status_code = 500
    error_type = "storage_error"


def _require_photo(engine: Engine, photo_id: int) -> PhotoOut:
    ph = photos_repo.find_by_id(engine, photo_id)
    if ph is None:
        raise NotFound(f"Photo with id {photo_id} not found")
    return ph


async def _read_upload(request: Request):
    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        detail = getattr(e, "message", None) or getattr(e, "detail", None) or str(e)
        raise ValidationError(f"Invalid multipart data: {detail}", error_type="invalid_multipart") from e

    part = form.get(PHOTO_FIELD)
    if part is None:
        raise ValidationError("No file provided", error_type="missing_file")
    # parts without a filename are parsed as plain text fields
    if not isinstance(part, UploadFile):
        raise ValidationError("No filename provided", error_type="missing_filename")

    filename = check_filename(part.filename)
    mime_type = check_content_type(part.content_type)
    data = await part.read(MAX_FILE_SIZE + 1)
    check_size(len(data))
    return filename, mime_type, data


@router.post("/miniatures/{miniature_id}/photos", response_model=PhotoOut)
async def upload_photo(
    miniature_id: int,
    request: Request,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> PhotoOut:
    filename, mime_type, data = await _read_upload(request)

    if await run_in_threadpool(miniatures_repo.find_by_id, engine, miniature_id) is None:
        raise NotFound(f"Miniature with id {miniature_id} not found")

    try:
        key = await run_in_threadpool(store_photo, storage, data, filename, miniature_id)
    except StorageError as e:
        emit(
            "error",
            "photo.store_failed",
            str(e),
            getattr(request.state, "request_id", None),
            __name__,
            miniature_id=miniature_id,
        )
        raise StorageFailure(f"Failed to store file: {e}") from e

    return await run_in_threadpool(
        photos_repo.create,
        engine,
        miniature_id,
        filename,
        key,
        len(data),
        mime_type,
    )


@router.get("/miniatures/{miniature_id}/photos", response_model=List[PhotoOut])
def list_photos(miniature_id: int, engine: Engine = Depends(get_engine)) -> List[PhotoOut]:
    if miniatures_repo.find_by_id(engine, miniature_id) is None:
        raise NotFound(f"Miniature with id {miniature_id} not found")
    return photos_repo.find_by_miniature(engine, miniature_id)


@router.delete("/photos/{photo_id}", status_code=204)
def delete_photo(
    photo_id: int,
    request: Request,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> Response:
    ph = photos_repo.delete(engine, photo_id)
    if ph is None:
        raise NotFound(f"Photo with id {photo_id} not found")

    discard_stored(storage, [ph.file_path], getattr(request.state, "request_id", None))
    return Response(status_code=204)


@router.get("/photos/{photo_id}/url", response_model=PhotoUrlOut)
def get_photo_url(
    photo_id: int,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> PhotoUrlOut:
    ph = _require_photo(engine, photo_id)
    try:
        url = storage.get_url(ph.file_path)
    except StorageError as e:
        raise StorageFailure(f"Failed to build URL: {e}") from e
    return PhotoUrlOut(photo_id=ph.id, url=url)


@router.get("/photos/{photo_id}/content")
def get_photo_content(
    photo_id: int,
    engine: Engine = Depends(get_engine),
    storage: StorageBackend = Depends(get_storage_dep),
) -> Response:
    ph = _require_photo(engine, photo_id)
    try:
        data = storage.retrieve(ph.file_path)
    except StorageNotFoundError as e:
        raise NotFound(f"Stored file for photo {photo_id} not found") from e
    except StorageError as e:
        raise StorageFailure(f"Failed to read file: {e}") from e
    return Response(content=data, media_type=ph.mime_type)
