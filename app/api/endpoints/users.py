from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
from typing import List

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.user import User
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services import storage

router = APIRouter()

@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, session: Session = Depends(get_session)):
    with service_errors():
        return storage.create_user(session, user_in)

@router.get("/", response_model=List[UserRead])
def list_users(session: Session = Depends(get_session)):
    return session.exec(select(User).order_by(User.username)).all()

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, User, user_id, "User")

@router.patch("/{user_id}", response_model=UserRead)
def update_user(user_id: int, user_in: UserUpdate, session: Session = Depends(get_session)):
    user = get_or_404(session, User, user_id, "User")
    return storage.update_user(session, user, user_in.dict(exclude_unset=True))

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, session: Session = Depends(get_session)):
    user = get_or_404(session, User, user_id, "User")
    storage.delete_user(session, user)
