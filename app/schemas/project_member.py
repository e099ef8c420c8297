from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.schemas.user import UserRead

class ProjectMemberCreate(BaseModel):
    user_id: int
    role: Optional[str] = "member"

class ProjectMemberRead(BaseModel):
    id: int
    project_id: int
    user_id: int
    role: Optional[str]
    joined_at: datetime
    user: Optional[UserRead] = None

    class Config:
        from_attributes = True

class ProjectMemberUpdate(BaseModel):
    role: Optional[str] = None
