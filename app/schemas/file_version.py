from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime

class FileVersionCreate(BaseModel):
    version_number: Optional[int] = Field(default=None, ge=1)  # si falta, max + 1
    created_by_id: Optional[int] = None
    path: Optional[str] = None
    size: Optional[int] = None
    content: Optional[str] = None
    file_metadata: Optional[Dict[str, Any]] = None
    change_description: Optional[str] = None

class FileVersionRead(BaseModel):
    id: int
    file_id: int
    version_number: int
    created_by_id: Optional[int]
    path: str
    size: int
    file_metadata: Optional[Dict[str, Any]]
    change_description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

class FileVersionUpdate(BaseModel):
    change_description: Optional[str] = None
    file_metadata: Optional[Dict[str, Any]] = None
