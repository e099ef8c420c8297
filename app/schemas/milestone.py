from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

class MilestoneCreate(BaseModel):
    name: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: bool = False

class MilestoneRead(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str]
    due_date: Optional[datetime]
    completed: bool
    created_at: datetime

    class Config:
        from_attributes = True

class MilestoneUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None

    @field_validator("name", "completed")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
