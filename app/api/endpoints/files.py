from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List, Optional

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.project import Project
from app.models.file import ProjectFile
from app.schemas.file import FileCreate, FileRead, FileUpdate
from app.services import storage

router = APIRouter()


@router.get("/project/{project_id}", response_model=List[FileRead])
def list_files(
    project_id: int,
    folder_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    get_or_404(session, Project, project_id, "Project")
    return storage.list_files(session, project_id, folder_id)


@router.post("/project/{project_id}", response_model=FileRead, status_code=status.HTTP_201_CREATED)
def create_file(project_id: int, file_in: FileCreate, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    with service_errors():
        storage.check_file_folder(session, project_id, file_in.folder_id)
    return storage.create_file(session, ProjectFile(project_id=project_id, **file_in.dict()))


@router.get("/{file_id}", response_model=FileRead)
def get_file(file_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, ProjectFile, file_id, "File")


@router.patch("/{file_id}", response_model=FileRead)
def update_file(file_id: int, file_in: FileUpdate, session: Session = Depends(get_session)):
    file_record = get_or_404(session, ProjectFile, file_id, "File")
    data = file_in.dict(exclude_unset=True)
    if "folder_id" in data:
        with service_errors():
            storage.check_file_folder(session, file_record.project_id, data["folder_id"])
    return storage.update_file(session, file_record, data)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(file_id: int, session: Session = Depends(get_session)):
    file_record = get_or_404(session, ProjectFile, file_id, "File")
    storage.delete_file(session, file_record)
