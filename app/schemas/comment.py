from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

class CommentCreate(BaseModel):
    content: str
    user_id: int
    task_id: Optional[int] = None
    file_id: Optional[int] = None

class CommentRead(BaseModel):
    id: int
    task_id: Optional[int]
    file_id: Optional[int]
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CommentUpdate(BaseModel):
    content: Optional[str] = None

    @field_validator("content")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
