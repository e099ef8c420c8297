from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.file import ProjectFile
from app.models.file_activity import FileActivity
from app.models.user import User
from app.schemas.file_activity import FileActivityCreate, FileActivityRead, FileActivityUpdate
from app.services import storage

router = APIRouter()

@router.get("/file/{file_id}", response_model=List[FileActivityRead])
def list_file_activities(file_id: int, session: Session = Depends(get_session)):
    get_or_404(session, ProjectFile, file_id, "File")
    return storage.list_file_activities(session, file_id)

@router.post("/file/{file_id}", response_model=FileActivityRead, status_code=status.HTTP_201_CREATED)
def create_file_activity(file_id: int, activity_in: FileActivityCreate, session: Session = Depends(get_session)):
    get_or_404(session, ProjectFile, file_id, "File")
    if activity_in.user_id is not None:
        with service_errors():
            storage.require(session, User, activity_in.user_id, "User")
    return storage.save(session, FileActivity(file_id=file_id, **activity_in.dict()))

@router.get("/{activity_id}", response_model=FileActivityRead)
def get_file_activity(activity_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, FileActivity, activity_id, "Activity")

@router.patch("/{activity_id}", response_model=FileActivityRead)
def update_file_activity(activity_id: int, activity_in: FileActivityUpdate, session: Session = Depends(get_session)):
    activity = get_or_404(session, FileActivity, activity_id, "Activity")
    storage.apply_update(activity, activity_in.dict(exclude_unset=True))
    return storage.save(session, activity)

@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file_activity(activity_id: int, session: Session = Depends(get_session)):
    activity = get_or_404(session, FileActivity, activity_id, "Activity")
    session.delete(activity)
    session.commit()
