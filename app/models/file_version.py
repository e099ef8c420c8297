from typing import Optional, Dict, Any
from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from sqlalchemy import JSON

class FileVersion(SQLModel, table=True):
    __tablename__ = "file_version"

    id: Optional[int] = Field(default=None, primary_key=True)
    file_id: int = Field(foreign_key="file.id", index=True)
    version_number: int
    created_by_id: Optional[int] = Field(default=None, foreign_key="user.id")
    path: str
    size: int
    file_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    change_description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
