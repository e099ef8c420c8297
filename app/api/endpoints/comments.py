from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.comment import Comment
from app.models.file import ProjectFile
from app.models.task import Task
from app.schemas.comment import CommentCreate, CommentRead, CommentUpdate
from app.services import storage

router = APIRouter()

@router.get("/task/{task_id}", response_model=List[CommentRead])
def list_task_comments(task_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Task, task_id, "Task")
    return storage.list_task_comments(session, task_id)

@router.get("/file/{file_id}", response_model=List[CommentRead])
def list_file_comments(file_id: int, session: Session = Depends(get_session)):
    get_or_404(session, ProjectFile, file_id, "File")
    return storage.list_file_comments(session, file_id)

@router.post("/", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def create_comment(comment_in: CommentCreate, session: Session = Depends(get_session)):
    with service_errors():
        storage.check_comment_refs(session, comment_in.task_id, comment_in.file_id, comment_in.user_id)
    return storage.save(session, Comment(**comment_in.dict()))

@router.get("/{comment_id}", response_model=CommentRead)
def get_comment(comment_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Comment, comment_id, "Comment")

@router.patch("/{comment_id}", response_model=CommentRead)
def update_comment(comment_id: int, comment_in: CommentUpdate, session: Session = Depends(get_session)):
    comment = get_or_404(session, Comment, comment_id, "Comment")
    storage.apply_update(comment, comment_in.dict(exclude_unset=True))
    return storage.save(session, comment)

@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, session: Session = Depends(get_session)):
    comment = get_or_404(session, Comment, comment_id, "Comment")
    session.delete(comment)
    session.commit()
