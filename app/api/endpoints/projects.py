from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404
from app.database import get_session
from app.models.project import Project
from app.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from app.services import storage

router = APIRouter()

@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(project_in: ProjectCreate, session: Session = Depends(get_session)):
    project = Project(**project_in.dict())
    return storage.save(session, project)

@router.get("/", response_model=List[ProjectRead])
def list_projects(session: Session = Depends(get_session)):
    return storage.list_projects(session)

@router.get("/{project_id}", response_model=ProjectRead)
def get_project(project_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Project, project_id, "Project")

@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    session: Session = Depends(get_session),
):
    project = get_or_404(session, Project, project_id, "Project")
    storage.apply_update(project, project_in.dict(exclude_unset=True))
    return storage.save(session, project)

@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, session: Session = Depends(get_session)):
    project = get_or_404(session, Project, project_id, "Project")
    storage.delete_project(session, project)
