# schemas/user.py

from typing import Optional
from pydantic import BaseModel, field_validator
from datetime import datetime


class UserCreate(BaseModel):
    username: str
    password: str
    full_name: str
    email: str
    avatar: Optional[str] = None
    role: Optional[str] = "member"


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[str] = None
    password: Optional[str] = None

    @field_validator("full_name", "email")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class UserRead(BaseModel):
    id: int
    username: str
    full_name: str
    email: str
    avatar: Optional[str]
    role: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
