from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal, Dict, Any
from datetime import datetime

FileType = Literal["model", "texture", "material", "animation", "document", "other"]

class FileCreate(BaseModel):
    name: str
    type: FileType
    file_extension: str
    path: str
    size: int = Field(ge=0)
    folder_id: Optional[int] = None
    content: Optional[str] = None
    file_metadata: Optional[Dict[str, Any]] = None

class FileRead(BaseModel):
    id: int
    project_id: int
    folder_id: Optional[int]
    name: str
    type: str
    file_extension: str
    path: str
    size: int
    content: Optional[str]
    file_metadata: Optional[Dict[str, Any]]
    current_version_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class FileUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[FileType] = None
    file_extension: Optional[str] = None
    path: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=0)
    folder_id: Optional[int] = None
    content: Optional[str] = None
    file_metadata: Optional[Dict[str, Any]] = None

    @field_validator("name", "type", "file_extension", "path", "size")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
