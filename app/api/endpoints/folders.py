from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List, Optional

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.project import Project
from app.models.folder import Folder
from app.schemas.folder import FolderCreate, FolderRead, FolderUpdate
from app.services import storage

router = APIRouter()

@router.get("/project/{project_id}", response_model=List[FolderRead])
def list_folders(
    project_id: int,
    parent_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    """Sin parent_id devuelve las carpetas raíz del proyecto."""
    get_or_404(session, Project, project_id, "Project")
    return storage.list_folders(session, project_id, parent_id)

@router.post("/project/{project_id}", response_model=FolderRead, status_code=status.HTTP_201_CREATED)
def create_folder(project_id: int, folder_in: FolderCreate, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    with service_errors():
        storage.check_folder_parent(session, project_id, folder_in.parent_id)
    return storage.save(session, Folder(project_id=project_id, **folder_in.dict()))

@router.get("/{folder_id}", response_model=FolderRead)
def get_folder(folder_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Folder, folder_id, "Folder")

@router.patch("/{folder_id}", response_model=FolderRead)
def update_folder(folder_id: int, folder_in: FolderUpdate, session: Session = Depends(get_session)):
    folder = get_or_404(session, Folder, folder_id, "Folder")
    data = folder_in.dict(exclude_unset=True)
    if "parent_id" in data:
        with service_errors():
            storage.check_folder_parent(session, folder.project_id, data["parent_id"], folder.id)
    storage.apply_update(folder, data)
    return storage.save(session, folder)

@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_folder(folder_id: int, session: Session = Depends(get_session)):
    folder = get_or_404(session, Folder, folder_id, "Folder")
    storage.delete_folder(session, folder)
