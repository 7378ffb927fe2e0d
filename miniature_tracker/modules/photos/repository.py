from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from miniature_tracker.core.db import delete_by_id, fetch_all, fetch_one, insert_returning_id, utc_now
from miniature_tracker.core.errors import InternalServerError

from .schemas import PhotoOut

TABLE = "photos"
_COLUMNS = "id, miniature_id, filename, file_path, file_size, mime_type, uploaded_at"


def _row_to_photo(row: Dict[str, Any]) -> PhotoOut:
    d = dict(row)
    d["file_size"] = int(d.get("file_size") or 0)
    d["mime_type"] = d.get("mime_type") or "application/octet-stream"
    return PhotoOut(**d)


def create(
    engine: Engine,
    miniature_id: int,
    filename: str,
    file_path: str,
    file_size: int,
    mime_type: str,
) -> PhotoOut:
    with engine.begin() as conn:
        new_id = insert_returning_id(
            conn,
            TABLE,
            {
                "miniature_id": miniature_id,
                "filename": filename,
                "file_path": file_path,
                "file_size": file_size,
                "mime_type": mime_type,
                "uploaded_at": utc_now(),
            },
        )
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": new_id})
    if row is None:
        raise InternalServerError("Inserted row could not be read back")
    return _row_to_photo(row)


def find_by_id(engine: Engine, photo_id: int) -> Optional[PhotoOut]:
    with engine.connect() as conn:
        row = fetch_one(conn, f"SELECT {_COLUMNS} FROM {TABLE} WHERE id = :id", {"id": photo_id})
    return _row_to_photo(row) if row is not None else None


def find_by_miniature(engine: Engine, miniature_id: int) -> List[PhotoOut]:
    with engine.connect() as conn:
        rows = fetch_all(
            conn,
            f"SELECT {_COLUMNS} FROM {TABLE} WHERE miniature_id = :mid ORDER BY uploaded_at, id",
            {"mid": miniature_id},
        )
    return [_row_to_photo(r) for r in rows]


def find_by_project(engine: Engine, project_id: int) -> List[PhotoOut]:
    with engine.connect() as conn:
        rows = fetch_all(
            conn,
            """
            SELECT p.id, p.miniature_id, p.filename, p.file_path, p.file_size, p.mime_type, p.uploaded_at
            FROM photos p
            INNER JOIN miniatures m ON m.id = p.miniature_id
            WHERE m.project_id = :pid
            ORDER BY p.uploaded_at, p.id
            """,
            {"pid": project_id},
        )
    return [_row_to_photo(r) for r in rows]


def delete(engine: Engine, photo_id: int) -> Optional[PhotoOut]:
    """
    Removes the row and hands back what was removed, so the caller can clean
    up the stored bytes. None if there was no such photo.
    """
    photo = find_by_id(engine, photo_id)
    if photo is None:
        return None
    with engine.begin() as conn:
        if delete_by_id(conn, TABLE, photo_id) == 0:
            return None
    return photo


def delete_by_miniature(engine: Engine, miniature_id: int) -> List[PhotoOut]:
    photos = find_by_miniature(engine, miniature_id)
    if photos:
        with engine.begin() as conn:
            conn.execute(text(f"DELETE FROM {TABLE} WHERE miniature_id = :mid"), {"mid": miniature_id})
    return photos
