from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel


# immutable once written; only deleted
class Photo(SQLModel, table=True):
    __tablename__ = "photos"

    id: Optional[int] = Field(default=None, primary_key=True)
    miniature_id: int = Field(
        sa_column=Column(Integer, ForeignKey("miniatures.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    filename: str = Field(max_length=255)
    file_path: str = Field(max_length=500)  # storage key, not a local path
    file_size: Optional[int] = None
    mime_type: Optional[str] = Field(default=None, max_length=100)
    uploaded_at: str
