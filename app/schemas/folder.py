from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

class FolderCreate(BaseModel):
    name: str
    parent_id: Optional[int] = None
    path: str

class FolderRead(BaseModel):
    id: int
    project_id: int
    name: str
    parent_id: Optional[int]
    path: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class FolderUpdate(BaseModel):
    name: Optional[str] = None
    parent_id: Optional[int] = None
    path: Optional[str] = None

    @field_validator("name", "path")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
