import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel import Session, select, func

from app.core.security import get_password_hash
from app.models.user import User
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.milestone import Milestone
from app.models.task import Task
from app.models.folder import Folder
from app.models.file import ProjectFile
from app.models.file_version import FileVersion
from app.models.file_activity import FileActivity
from app.models.comment import Comment
from app.schemas.user import UserCreate
from app.schemas.file_version import FileVersionCreate

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """A referenced row does not exist."""


def save(session: Session, obj):
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def apply_update(obj, data: Dict[str, Any]):
    for key, value in data.items():
        setattr(obj, key, value)
    if hasattr(obj, "updated_at"):
        obj.updated_at = datetime.utcnow()
    return obj


def require(session: Session, model, obj_id: Optional[int], label: str):
    obj = session.get(model, obj_id) if obj_id is not None else None
    if obj is None:
        raise NotFoundError(f"{label} not found")
    return obj


# ---------- users ----------

def create_user(session: Session, user_in: UserCreate) -> User:
    if session.exec(select(User).where(User.username == user_in.username)).first():
        raise ValueError("Username already registered")
    user = User(
        username=user_in.username,
        password_hash=get_password_hash(user_in.password),
        full_name=user_in.full_name,
        email=user_in.email,
        avatar=user_in.avatar,
        role=user_in.role,
    )
    return save(session, user)


def update_user(session: Session, user: User, data: Dict[str, Any]) -> User:
    password = data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for key, value in data.items():
        setattr(user, key, value)
    return save(session, user)


def delete_user(session: Session, user: User) -> None:
    """Drops memberships and comments; nulls out the user's other references."""
    for member in session.exec(select(ProjectMember).where(ProjectMember.user_id == user.id)).all():
        session.delete(member)
    for comment in session.exec(select(Comment).where(Comment.user_id == user.id)).all():
        session.delete(comment)
    for task in session.exec(select(Task).where(Task.assignee_id == user.id)).all():
        task.assignee_id = None
        session.add(task)
    for version in session.exec(select(FileVersion).where(FileVersion.created_by_id == user.id)).all():
        version.created_by_id = None
        session.add(version)
    for activity in session.exec(select(FileActivity).where(FileActivity.user_id == user.id)).all():
        activity.user_id = None
        session.add(activity)
    session.flush()
    session.delete(user)
    session.commit()
    logger.info("Deleted user %s", user.id)


# ---------- projects ----------

def list_projects(session: Session) -> List[Project]:
    return session.exec(select(Project).order_by(Project.created_at.desc(), Project.id.desc())).all()


def delete_project(session: Session, project: Project) -> None:
    """Removes the project and everything it owns, children first."""
    files = session.exec(select(ProjectFile).where(ProjectFile.project_id == project.id)).all()
    for f in files:
        _delete_file_rows(session, f)
    session.flush()

    tasks = session.exec(select(Task).where(Task.project_id == project.id)).all()
    for task in tasks:
        _delete_task_rows(session, task)
    session.flush()

    for milestone in session.exec(select(Milestone).where(Milestone.project_id == project.id)).all():
        session.delete(milestone)

    folders = session.exec(select(Folder).where(Folder.project_id == project.id)).all()
    for folder in folders:
        folder.parent_id = None
        session.add(folder)
    session.flush()
    for folder in folders:
        session.delete(folder)

    for member in session.exec(select(ProjectMember).where(ProjectMember.project_id == project.id)).all():
        session.delete(member)
    session.flush()

    session.delete(project)
    session.commit()
    logger.info(
        "Deleted project %s (%d files, %d tasks, %d folders)",
        project.id, len(files), len(tasks), len(folders),
    )


# ---------- members ----------

def list_members(session: Session, project_id: int) -> List[Tuple[ProjectMember, User]]:
    rows = session.exec(
        select(ProjectMember, User)
        .where(ProjectMember.user_id == User.id)
        .where(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.joined_at, ProjectMember.id)
    ).all()
    return list(rows)


def add_member(session: Session, project_id: int, user_id: int, role: Optional[str]) -> ProjectMember:
    require(session, User, user_id, "User")
    existing = session.exec(
        select(ProjectMember)
        .where(ProjectMember.project_id == project_id)
        .where(ProjectMember.user_id == user_id)
    ).first()
    if existing:
        raise ValueError("User is already a member of this project")
    return save(session, ProjectMember(project_id=project_id, user_id=user_id, role=role))


def find_member(session: Session, project_id: int, user_id: int) -> Optional[ProjectMember]:
    return session.exec(
        select(ProjectMember)
        .where(ProjectMember.project_id == project_id)
        .where(ProjectMember.user_id == user_id)
    ).first()


# ---------- milestones ----------

def list_milestones(session: Session, project_id: int) -> List[Milestone]:
    return session.exec(
        select(Milestone)
        .where(Milestone.project_id == project_id)
        .order_by(Milestone.due_date, Milestone.id)
    ).all()


def delete_milestone(session: Session, milestone: Milestone) -> None:
    for task in session.exec(select(Task).where(Task.milestone_id == milestone.id)).all():
        task.milestone_id = None
        session.add(task)
    session.flush()
    session.delete(milestone)
    session.commit()


# ---------- tasks ----------

def list_tasks(session: Session, project_id: int, milestone_id: Optional[int] = None) -> List[Task]:
    q = select(Task).where(Task.project_id == project_id)
    if milestone_id is not None:
        q = q.where(Task.milestone_id == milestone_id)
    return session.exec(q.order_by(Task.due_date, Task.id)).all()


def check_task_refs(session: Session, project_id: int, data: Dict[str, Any]) -> None:
    milestone_id = data.get("milestone_id")
    if milestone_id is not None:
        milestone = require(session, Milestone, milestone_id, "Milestone")
        if milestone.project_id != project_id:
            raise ValueError("Milestone belongs to another project")
    assignee_id = data.get("assignee_id")
    if assignee_id is not None:
        require(session, User, assignee_id, "Assignee")


def _delete_task_rows(session: Session, task: Task) -> None:
    for comment in session.exec(select(Comment).where(Comment.task_id == task.id)).all():
        session.delete(comment)
    session.flush()
    session.delete(task)


def delete_task(session: Session, task: Task) -> None:
    _delete_task_rows(session, task)
    session.commit()


# ---------- folders ----------

def list_folders(session: Session, project_id: int, parent_id: Optional[int] = None) -> List[Folder]:
    q = select(Folder).where(Folder.project_id == project_id)
    if parent_id is not None:
        q = q.where(Folder.parent_id == parent_id)
    else:
        q = q.where(Folder.parent_id == None)  # noqa: E711
    return session.exec(q.order_by(Folder.name)).all()


def folder_tree_ids(session: Session, root_id: int) -> List[int]:
    """Ids of the folder and all its descendants, breadth first."""
    ids = [root_id]
    frontier = [root_id]
    while frontier:
        children = session.exec(select(Folder.id).where(Folder.parent_id.in_(frontier))).all()
        frontier = [c for c in children if c not in ids]
        ids.extend(frontier)
    return ids


def check_folder_parent(session: Session, project_id: int, parent_id: Optional[int], folder_id: Optional[int] = None) -> None:
    if parent_id is None:
        return
    parent = require(session, Folder, parent_id, "Parent folder")
    if parent.project_id != project_id:
        raise ValueError("Parent folder belongs to another project")
    if folder_id is not None and parent_id in folder_tree_ids(session, folder_id):
        raise ValueError("A folder cannot be moved inside itself or one of its subfolders")


def delete_folder(session: Session, folder: Folder) -> None:
    """Deletes the folder, its subfolders and every file inside them."""
    ids = folder_tree_ids(session, folder.id)
    files = session.exec(select(ProjectFile).where(ProjectFile.folder_id.in_(ids))).all()
    for f in files:
        _delete_file_rows(session, f)
    session.flush()

    folders = session.exec(select(Folder).where(Folder.id.in_(ids))).all()
    for sub in folders:
        sub.parent_id = None
        session.add(sub)
    session.flush()
    for sub in folders:
        session.delete(sub)
    session.commit()
    logger.info("Deleted folder %s with %d subfolders and %d files", folder.id, len(ids) - 1, len(files))


# ---------- files ----------

def list_files(session: Session, project_id: int, folder_id: Optional[int] = None) -> List[ProjectFile]:
    q = select(ProjectFile).where(ProjectFile.project_id == project_id)
    if folder_id is not None:
        q = q.where(ProjectFile.folder_id == folder_id)
    return session.exec(q.order_by(ProjectFile.name)).all()


def check_file_folder(session: Session, project_id: int, folder_id: Optional[int]) -> None:
    if folder_id is None:
        return
    folder = require(session, Folder, folder_id, "Folder")
    if folder.project_id != project_id:
        raise ValueError("Folder belongs to another project")


def create_file(session: Session, file: ProjectFile) -> ProjectFile:
    session.add(file)
    session.flush()
    session.add(FileActivity(file_id=file.id, action="created", details={"name": file.name}))
    return save(session, file)


def update_file(session: Session, file: ProjectFile, data: Dict[str, Any]) -> ProjectFile:
    old_name = file.name
    apply_update(file, data)
    if file.name != old_name:
        session.add(FileActivity(file_id=file.id, action="renamed", details={"from": old_name, "to": file.name}))
    return save(session, file)


def _delete_file_rows(session: Session, file: ProjectFile) -> None:
    for model in (FileVersion, FileActivity, Comment):
        for row in session.exec(select(model).where(model.file_id == file.id)).all():
            session.delete(row)
    session.flush()
    session.delete(file)


def delete_file(session: Session, file: ProjectFile) -> None:
    _delete_file_rows(session, file)
    session.commit()


# ---------- versions / activities ----------

def list_file_versions(session: Session, file_id: int) -> List[FileVersion]:
    return session.exec(
        select(FileVersion)
        .where(FileVersion.file_id == file_id)
        .order_by(FileVersion.version_number.desc())
    ).all()


def create_file_version(session: Session, file: ProjectFile, version_in: FileVersionCreate) -> FileVersion:
    """
    Registra una nueva versión de forma atómica:
    inserta la versión, apunta el fichero a ella y deja constancia en file_activity.
    Si algo falla no queda nada a medias.
    """
    try:
        if version_in.created_by_id is not None:
            require(session, User, version_in.created_by_id, "User")

        last_number = session.exec(
            select(func.max(FileVersion.version_number)).where(FileVersion.file_id == file.id)
        ).first() or 0
        number = version_in.version_number if version_in.version_number is not None else last_number + 1
        clash = session.exec(
            select(FileVersion)
            .where(FileVersion.file_id == file.id)
            .where(FileVersion.version_number == number)
        ).first()
        if clash:
            raise ValueError(f"Version {number} already exists")

        if version_in.size is not None:
            size = version_in.size
        elif version_in.content is not None:
            size = len(version_in.content.encode("utf-8"))
        else:
            size = file.size

        version = FileVersion(
            file_id=file.id,
            version_number=number,
            created_by_id=version_in.created_by_id,
            path=version_in.path or file.path,
            size=size,
            file_metadata=version_in.file_metadata,
            change_description=version_in.change_description,
        )
        session.add(version)
        session.flush()

        file.current_version_id = version.id
        file.path = version.path
        file.size = version.size
        if version_in.content is not None:
            file.content = version_in.content
        file.updated_at = datetime.utcnow()
        session.add(file)

        session.add(FileActivity(
            file_id=file.id,
            user_id=version_in.created_by_id,
            action="version",
            details={"version_number": number, "change_description": version_in.change_description},
        ))
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(version)
    logger.info("File %s now at version %s", file.id, number)
    return version


def delete_file_version(session: Session, version: FileVersion) -> None:
    file = session.get(ProjectFile, version.file_id)
    if file and file.current_version_id == version.id:
        file.current_version_id = None
        session.add(file)
    session.delete(version)
    session.commit()


def list_file_activities(session: Session, file_id: int) -> List[FileActivity]:
    return session.exec(
        select(FileActivity)
        .where(FileActivity.file_id == file_id)
        .order_by(FileActivity.created_at.desc(), FileActivity.id.desc())
    ).all()


# ---------- comments ----------

def list_task_comments(session: Session, task_id: int) -> List[Comment]:
    return session.exec(
        select(Comment).where(Comment.task_id == task_id).order_by(Comment.created_at, Comment.id)
    ).all()


def list_file_comments(session: Session, file_id: int) -> List[Comment]:
    return session.exec(
        select(Comment).where(Comment.file_id == file_id).order_by(Comment.created_at, Comment.id)
    ).all()


def check_comment_refs(session: Session, task_id: Optional[int], file_id: Optional[int], user_id: int) -> None:
    if task_id is None and file_id is None:
        raise ValueError("A comment needs a task_id or a file_id")
    if task_id is not None:
        require(session, Task, task_id, "Task")
    if file_id is not None:
        require(session, ProjectFile, file_id, "File")
    require(session, User, user_id, "User")


class StoreDataSource:
    """Read side used by the dashboard when it runs next to the database."""

    def __init__(self, session: Session):
        self.session = session

    def list_projects(self):
        return list_projects(self.session)

    def list_milestones(self, project_id: int):
        return list_milestones(self.session, project_id)

    def list_members(self, project_id: int):
        return [
            {"id": m.id, "user_id": u.id, "full_name": u.full_name, "role": m.role}
            for m, u in list_members(self.session, project_id)
        ]

    def list_tasks(self, project_id: int):
        return list_tasks(self.session, project_id)

    def list_files(self, project_id: int, folder_id: Optional[int] = None):
        return list_files(self.session, project_id, folder_id)

    def list_file_versions(self, file_id: int):
        return list_file_versions(self.session, file_id)
