from typing import Optional, Dict, Any
from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from sqlalchemy import JSON

FILE_TYPES = ["model", "texture", "material", "animation", "document", "other"]


class ProjectFile(SQLModel, table=True):
    """Asset tracked by a project (model, texture, material...)."""

    __tablename__ = "file"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    folder_id: Optional[int] = Field(default=None, foreign_key="folder.id", index=True)
    name: str
    type: str                      # ver FILE_TYPES
    file_extension: str
    path: str
    size: int                      # bytes
    content: Optional[str] = None
    file_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    # sin foreign key: file_version ya apunta a file
    current_version_id: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
