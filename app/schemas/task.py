from pydantic import BaseModel, field_validator
from typing import Optional, Literal
from datetime import datetime

TaskStatus = Literal["backlog", "todo", "in_progress", "review", "done"]

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    milestone_id: Optional[int] = None
    assignee_id: Optional[int] = None
    status: TaskStatus = "todo"
    priority: Optional[str] = "medium"
    due_date: Optional[datetime] = None
    estimated_hours: Optional[int] = None

class TaskRead(BaseModel):
    id: int
    project_id: int
    milestone_id: Optional[int]
    assignee_id: Optional[int]
    title: str
    description: Optional[str]
    status: str
    priority: Optional[str]
    due_date: Optional[datetime]
    estimated_hours: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    milestone_id: Optional[int] = None
    assignee_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[int] = None

    @field_validator("title", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
