from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List, Optional

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.project import Project
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from app.services import storage

router = APIRouter()

@router.get("/project/{project_id}", response_model=List[TaskRead])
def list_tasks(
    project_id: int,
    milestone_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    get_or_404(session, Project, project_id, "Project")
    return storage.list_tasks(session, project_id, milestone_id)

@router.post("/project/{project_id}", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(project_id: int, task_in: TaskCreate, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    data = task_in.dict()
    with service_errors():
        storage.check_task_refs(session, project_id, data)
    return storage.save(session, Task(project_id=project_id, **data))

@router.get("/{task_id}", response_model=TaskRead)
def get_task(task_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Task, task_id, "Task")

@router.patch("/{task_id}", response_model=TaskRead)
def update_task(task_id: int, task_in: TaskUpdate, session: Session = Depends(get_session)):
    task = get_or_404(session, Task, task_id, "Task")
    data = task_in.dict(exclude_unset=True)
    with service_errors():
        storage.check_task_refs(session, task.project_id, data)
    storage.apply_update(task, data)
    return storage.save(session, task)

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, session: Session = Depends(get_session)):
    task = get_or_404(session, Task, task_id, "Task")
    storage.delete_task(session, task)
