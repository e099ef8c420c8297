from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404, service_errors
from app.database import get_session
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.user import User
from app.schemas.project_member import ProjectMemberCreate, ProjectMemberRead, ProjectMemberUpdate
from app.schemas.user import UserRead
from app.services import storage

router = APIRouter()


def member_read(member: ProjectMember, user: User) -> ProjectMemberRead:
    return ProjectMemberRead(
        id=member.id,
        project_id=member.project_id,
        user_id=member.user_id,
        role=member.role,
        joined_at=member.joined_at,
        user=UserRead.model_validate(user),
    )


@router.get("/project/{project_id}", response_model=List[ProjectMemberRead])
def list_members(project_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    return [member_read(m, u) for m, u in storage.list_members(session, project_id)]


@router.post("/project/{project_id}", response_model=ProjectMemberRead, status_code=status.HTTP_201_CREATED)
def add_member(project_id: int, member_in: ProjectMemberCreate, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    with service_errors():
        member = storage.add_member(session, project_id, member_in.user_id, member_in.role)
    return member_read(member, session.get(User, member.user_id))


@router.delete("/project/{project_id}/user/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member_by_user(project_id: int, user_id: int, session: Session = Depends(get_session)):
    member = storage.find_member(session, project_id, user_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    session.delete(member)
    session.commit()


@router.get("/{member_id}", response_model=ProjectMemberRead)
def get_member(member_id: int, session: Session = Depends(get_session)):
    member = get_or_404(session, ProjectMember, member_id, "Member")
    return member_read(member, session.get(User, member.user_id))


@router.patch("/{member_id}", response_model=ProjectMemberRead)
def update_member(member_id: int, member_in: ProjectMemberUpdate, session: Session = Depends(get_session)):
    member = get_or_404(session, ProjectMember, member_id, "Member")
    storage.apply_update(member, member_in.dict(exclude_unset=True))
    storage.save(session, member)
    return member_read(member, session.get(User, member.user_id))


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(member_id: int, session: Session = Depends(get_session)):
    member = get_or_404(session, ProjectMember, member_id, "Member")
    session.delete(member)
    session.commit()
