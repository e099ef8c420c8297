from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

class ProjectMember(SQLModel, table=True):
    __tablename__ = "project_member"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    role: Optional[str] = "member"
    joined_at: datetime = Field(default_factory=datetime.utcnow)
