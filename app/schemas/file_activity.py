from pydantic import BaseModel, field_validator
from typing import Optional, Dict, Any
from datetime import datetime

class FileActivityCreate(BaseModel):
    action: str
    user_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

class FileActivityRead(BaseModel):
    id: int
    file_id: int
    user_id: Optional[int]
    action: str
    details: Optional[Dict[str, Any]]
    created_at: datetime

    class Config:
        from_attributes = True

class FileActivityUpdate(BaseModel):
    action: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    @field_validator("action")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
