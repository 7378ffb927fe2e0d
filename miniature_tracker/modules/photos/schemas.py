from __future__ import annotations

from pydantic import BaseModel


class PhotoOut(BaseModel):
    id: int
    miniature_id: int
    filename: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: str


class PhotoUrlOut(BaseModel):
    photo_id: int
    url: str
