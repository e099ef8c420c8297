from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class Folder(SQLModel, table=True):
    """Folder inside a project. Subfolders point at their parent through parent_id."""

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    name: str
    parent_id: Optional[int] = Field(default=None, foreign_key="folder.id", index=True)
    path: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
