# Importa todos los modelos para que SQLModel.metadata conozca cada tabla.
from app.models.user import User  # noqa
from app.models.project import Project  # noqa
from app.models.project_member import ProjectMember  # noqa
from app.models.milestone import Milestone  # noqa
from app.models.task import Task  # noqa
from app.models.folder import Folder  # noqa
from app.models.file import ProjectFile  # noqa
from app.models.file_version import FileVersion  # noqa
from app.models.file_activity import FileActivity  # noqa
from app.models.comment import Comment  # noqa
