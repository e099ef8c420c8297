from typing import Optional, Dict, Any
from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from sqlalchemy import JSON

class FileActivity(SQLModel, table=True):
    __tablename__ = "file_activity"

    id: Optional[int] = Field(default=None, primary_key=True)
    file_id: int = Field(foreign_key="file.id", index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")
    action: str  # "created" | "updated" | "deleted" | "renamed" | "version"
    details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
