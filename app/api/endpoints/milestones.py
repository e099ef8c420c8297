from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from app.api.deps import get_or_404
from app.database import get_session
from app.models.project import Project
from app.models.milestone import Milestone
from app.schemas.milestone import MilestoneCreate, MilestoneRead, MilestoneUpdate
from app.services import storage

router = APIRouter()

@router.get("/project/{project_id}", response_model=List[MilestoneRead])
def list_milestones(project_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    return storage.list_milestones(session, project_id)

@router.post("/project/{project_id}", response_model=MilestoneRead, status_code=status.HTTP_201_CREATED)
def create_milestone(project_id: int, milestone_in: MilestoneCreate, session: Session = Depends(get_session)):
    get_or_404(session, Project, project_id, "Project")
    milestone = Milestone(project_id=project_id, **milestone_in.dict())
    return storage.save(session, milestone)

@router.get("/{milestone_id}", response_model=MilestoneRead)
def get_milestone(milestone_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, Milestone, milestone_id, "Milestone")

@router.patch("/{milestone_id}", response_model=MilestoneRead)
def update_milestone(milestone_id: int, milestone_in: MilestoneUpdate, session: Session = Depends(get_session)):
    milestone = get_or_404(session, Milestone, milestone_id, "Milestone")
    storage.apply_update(milestone, milestone_in.dict(exclude_unset=True))
    return storage.save(session, milestone)

@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_milestone(milestone_id: int, session: Session = Depends(get_session)):
    milestone = get_or_404(session, Milestone, milestone_id, "Milestone")
    storage.delete_milestone(session, milestone)
