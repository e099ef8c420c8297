from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

TASK_STATUSES = ["backlog", "todo", "in_progress", "review", "done"]

class Task(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="milestone.id", index=True)
    assignee_id: Optional[int] = Field(default=None, foreign_key="user.id")
    title: str
    description: Optional[str] = None
    status: str = "todo"           # 'backlog', 'todo', 'in_progress', 'review', 'done'
    priority: Optional[str] = "medium"
    due_date: Optional[datetime] = None
    estimated_hours: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
