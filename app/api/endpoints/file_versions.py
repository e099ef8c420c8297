from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.file import ProjectFile
from app.models.file_version import FileVersion
from app.schemas.file_version import FileVersionCreate, FileVersionRead, FileVersionUpdate
from app.services import storage

router = APIRouter()

@router.get("/file/{file_id}", response_model=List[FileVersionRead])
def list_file_versions(file_id: int, session: Session = Depends(get_session)):
    get_or_404(session, ProjectFile, file_id, "File")
    return storage.list_file_versions(session, file_id)

@router.post("/file/{file_id}", response_model=FileVersionRead, status_code=status.HTTP_201_CREATED)
def create_file_version(file_id: int, version_in: FileVersionCreate, session: Session = Depends(get_session)):
    """
    Crea la versión, actualiza el fichero y registra la actividad
    en una sola transacción.
    """
    file_record = get_or_404(session, ProjectFile, file_id, "File")
    with service_errors():
        return storage.create_file_version(session, file_record, version_in)

@router.get("/{version_id}", response_model=FileVersionRead)
def get_file_version(version_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, FileVersion, version_id, "Version")

@router.patch("/{version_id}", response_model=FileVersionRead)
def update_file_version(version_id: int, version_in: FileVersionUpdate, session: Session = Depends(get_session)):
    version = get_or_404(session, FileVersion, version_id, "Version")
    storage.apply_update(version, version_in.dict(exclude_unset=True))
    return storage.save(session, version)

@router.delete("/{version_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file_version(version_id: int, session: Session = Depends(get_session)):
    version = get_or_404(session, FileVersion, version_id, "Version")
    storage.delete_file_version(session, version)
