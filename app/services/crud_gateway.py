import logging
from typing import Any, Dict, Optional, Tuple

import requests

from app.core.config import Settings

logger = logging.getLogger(__name__)

Scope = Tuple[Any, ...]
Params = Tuple[Tuple[str, Any], ...]


class GatewayError(Exception):
    """Request failed; the cause is not told apart."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GatewayValidationError(GatewayError):
    def __init__(self, message: str, errors=None, status_code: Optional[int] = 400):
        super().__init__(message, status_code)
        self.errors = errors or []


class GatewayNotFound(GatewayError):
    def __init__(self, message: str):
        super().__init__(message, 404)


# Ámbitos de elementos sueltos que cuelgan de un proyecto
CHILD_KINDS = ("project_members", "milestones", "tasks", "folders", "files", "file_versions", "file_activities", "comments")


def _params_key(params: Optional[Dict[str, Any]]) -> Params:
    return tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))


class QueryCache:
    """
    Cached GET results, keyed by (scope, params).

    A scope like ("projects", 3, "files") can hold several entries, one per
    filter (e.g. folder_id); invalidating the scope drops all of them.
    """

    def __init__(self):
        self._entries: Dict[Tuple[Scope, Params], Any] = {}

    def get(self, scope: Scope, params: Optional[Dict[str, Any]] = None):
        return self._entries.get((scope, _params_key(params)))

    def has(self, scope: Scope, params: Optional[Dict[str, Any]] = None) -> bool:
        return (scope, _params_key(params)) in self._entries

    def set(self, scope: Scope, value, params: Optional[Dict[str, Any]] = None) -> None:
        self._entries[(scope, _params_key(params))] = value

    def invalidate(self, scope: Scope) -> None:
        for key in [k for k in self._entries if k[0] == scope]:
            del self._entries[key]

    def invalidate_prefix(self, prefix: Scope) -> None:
        n = len(prefix)
        for key in [k for k in self._entries if k[0][:n] == prefix]:
            del self._entries[key]

    def scopes(self):
        return {k[0] for k in self._entries}

    def clear(self) -> None:
        self._entries.clear()


class CrudGateway:
    """
    Cliente del API REST de proyectos.

    Cada operación es una sola llamada HTTP; las escrituras invalidan las
    listas cacheadas del mismo ámbito y de sus padres. No hay reintentos.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http=None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        if base_url is None or timeout is None:
            if settings is None:
                settings = Settings()
            base_url = base_url or settings.api_base_url
            timeout = timeout if timeout is not None else settings.gateway_timeout
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()
        self.cache = QueryCache()

    # ---------- plumbing ----------

    def _request(self, method: str, path: str, action: str, json=None, params=None):
        url = self.base_url + path
        try:
            response = self.http.request(method, url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Gateway %s %s failed: %s", method, url, exc)
            raise GatewayError(f"Failed to {action}") from exc

        status = response.status_code
        if status == 404:
            detail = self._detail(response) or "Not found"
            raise GatewayNotFound(detail)
        if status in (400, 422):
            body = self._body(response)
            logger.warning("Gateway %s %s rejected: %s", method, url, body)
            raise GatewayValidationError(
                body.get("detail") if isinstance(body.get("detail"), str) else "Validation failed",
                errors=body.get("errors") or body.get("detail"),
                status_code=status,
            )
        if status >= 400:
            logger.error("Gateway %s %s failed with status %s", method, url, status)
            raise GatewayError(f"Failed to {action}", status)
        if status == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _body(response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _detail(self, response) -> Optional[str]:
        detail = self._body(response).get("detail")
        return detail if isinstance(detail, str) else None

    def _cached_get(self, scope: Scope, path: str, action: str, params: Optional[Dict[str, Any]] = None):
        if self.cache.has(scope, params):
            return self.cache.get(scope, params)
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        data = self._request("GET", path, action, params=clean or None)
        self.cache.set(scope, data, params)
        return data

    def _invalidate(self, *scopes: Scope) -> None:
        for scope in scopes:
            self.cache.invalidate(scope)

    # ---------- users ----------

    def list_users(self):
        return self._cached_get(("users",), "/users/", "load users")

    def get_user(self, user_id: int):
        return self._cached_get(("users", user_id), f"/users/{user_id}", "load user")

    def create_user(self, data: Dict[str, Any]):
        user = self._request("POST", "/users/", "create user", json=data)
        self._invalidate(("users",))
        return user

    def update_user(self, user_id: int, data: Dict[str, Any]):
        user = self._request("PATCH", f"/users/{user_id}", "update user", json=data)
        self._invalidate(("users",), ("users", user_id))
        return user

    def delete_user(self, user_id: int):
        self._request("DELETE", f"/users/{user_id}", "delete user")
        # el servidor borra membresías y comentarios y desvincula tareas, versiones y actividad
        self.cache.clear()

    # ---------- projects ----------

    def list_projects(self):
        return self._cached_get(("projects",), "/projects/", "load projects")

    def get_project(self, project_id: int):
        return self._cached_get(("projects", project_id), f"/projects/{project_id}", "load project")

    def create_project(self, data: Dict[str, Any]):
        project = self._request("POST", "/projects/", "create project", json=data)
        self._invalidate(("projects",))
        return project

    def update_project(self, project_id: int, data: Dict[str, Any]):
        project = self._request("PATCH", f"/projects/{project_id}", "update project", json=data)
        self._invalidate(("projects",), ("projects", project_id))
        return project

    def delete_project(self, project_id: int):
        self._request("DELETE", f"/projects/{project_id}", "delete project")
        self._invalidate(("projects",))
        self.cache.invalidate_prefix(("projects", project_id))
        for kind in CHILD_KINDS:
            self.cache.invalidate_prefix((kind,))

    # ---------- members ----------

    def list_members(self, project_id: int):
        return self._cached_get(
            ("projects", project_id, "members"), f"/project_members/project/{project_id}", "load members"
        )

    def get_member(self, member_id: int):
        return self._cached_get(("project_members", member_id), f"/project_members/{member_id}", "load member")

    def add_member(self, project_id: int, user_id: int, role: str = "member"):
        member = self._request(
            "POST", f"/project_members/project/{project_id}", "add member",
            json={"user_id": user_id, "role": role},
        )
        self._invalidate(("projects", project_id, "members"))
        return member

    def update_member(self, member_id: int, data: Dict[str, Any]):
        member = self._request("PATCH", f"/project_members/{member_id}", "update member", json=data)
        self._invalidate(("projects", member["project_id"], "members"), ("project_members", member_id))
        return member

    def remove_member(self, project_id: int, user_id: int):
        self._request("DELETE", f"/project_members/project/{project_id}/user/{user_id}", "remove member")
        self._invalidate(("projects", project_id, "members"))

    # ---------- milestones ----------

    def list_milestones(self, project_id: int):
        return self._cached_get(
            ("projects", project_id, "milestones"), f"/milestones/project/{project_id}", "load milestones"
        )

    def get_milestone(self, milestone_id: int):
        return self._cached_get(("milestones", milestone_id), f"/milestones/{milestone_id}", "load milestone")

    def create_milestone(self, project_id: int, data: Dict[str, Any]):
        milestone = self._request("POST", f"/milestones/project/{project_id}", "create milestone", json=data)
        self._invalidate(("projects", project_id, "milestones"))
        return milestone

    def update_milestone(self, milestone_id: int, data: Dict[str, Any]):
        milestone = self._request("PATCH", f"/milestones/{milestone_id}", "update milestone", json=data)
        self._invalidate(("projects", milestone["project_id"], "milestones"), ("milestones", milestone_id))
        return milestone

    def delete_milestone(self, milestone_id: int, project_id: int):
        self._request("DELETE", f"/milestones/{milestone_id}", "delete milestone")
        # las tareas pierden su milestone_id
        self._invalidate(
            ("projects", project_id, "milestones"), ("milestones", milestone_id), ("projects", project_id, "tasks")
        )
        self.cache.invalidate_prefix(("tasks",))

    # ---------- tasks ----------

    def list_tasks(self, project_id: int, milestone_id: Optional[int] = None):
        return self._cached_get(
            ("projects", project_id, "tasks"), f"/tasks/project/{project_id}", "load tasks",
            params={"milestone_id": milestone_id},
        )

    def get_task(self, task_id: int):
        return self._cached_get(("tasks", task_id), f"/tasks/{task_id}", "load task")

    def create_task(self, project_id: int, data: Dict[str, Any]):
        task = self._request("POST", f"/tasks/project/{project_id}", "create task", json=data)
        self._invalidate(("projects", project_id, "tasks"))
        return task

    def update_task(self, task_id: int, data: Dict[str, Any]):
        task = self._request("PATCH", f"/tasks/{task_id}", "update task", json=data)
        self._invalidate(("projects", task["project_id"], "tasks"), ("tasks", task_id))
        return task

    def delete_task(self, task_id: int, project_id: int):
        self._request("DELETE", f"/tasks/{task_id}", "delete task")
        self._invalidate(("projects", project_id, "tasks"))
        self.cache.invalidate_prefix(("tasks", task_id))
        self.cache.invalidate_prefix(("comments",))

    # ---------- folders ----------

    def list_folders(self, project_id: int, parent_id: Optional[int] = None):
        return self._cached_get(
            ("projects", project_id, "folders"), f"/folders/project/{project_id}", "load folders",
            params={"parent_id": parent_id},
        )

    def get_folder(self, folder_id: int):
        return self._cached_get(("folders", folder_id), f"/folders/{folder_id}", "load folder")

    def create_folder(self, project_id: int, data: Dict[str, Any]):
        folder = self._request("POST", f"/folders/project/{project_id}", "create folder", json=data)
        self._invalidate(("projects", project_id, "folders"))
        return folder

    def update_folder(self, folder_id: int, data: Dict[str, Any]):
        folder = self._request("PATCH", f"/folders/{folder_id}", "update folder", json=data)
        self._invalidate(("projects", folder["project_id"], "folders"), ("folders", folder_id))
        return folder

    def delete_folder(self, folder_id: int, project_id: int):
        self._request("DELETE", f"/folders/{folder_id}", "delete folder")
        # se borran también subcarpetas y ficheros
        self._invalidate(("projects", project_id, "folders"), ("projects", project_id, "files"))
        self.cache.invalidate_prefix(("folders",))
        self.cache.invalidate_prefix(("files",))
        for kind in ("file_versions", "file_activities", "comments"):
            self.cache.invalidate_prefix((kind,))

    # ---------- files ----------

    def list_files(self, project_id: int, folder_id: Optional[int] = None):
        return self._cached_get(
            ("projects", project_id, "files"), f"/files/project/{project_id}", "load files",
            params={"folder_id": folder_id},
        )

    def get_file(self, file_id: int):
        return self._cached_get(("files", file_id), f"/files/{file_id}", "load file")

    def create_file(self, project_id: int, data: Dict[str, Any]):
        created = self._request("POST", f"/files/project/{project_id}", "create file", json=data)
        # invalida la lista del proyecto y la de la carpeta
        self._invalidate(("projects", project_id, "files"))
        return created

    def update_file(self, file_id: int, data: Dict[str, Any]):
        updated = self._request("PATCH", f"/files/{file_id}", "update file", json=data)
        self._invalidate(
            ("projects", updated["project_id"], "files"), ("files", file_id), ("files", file_id, "activities")
        )
        return updated

    def delete_file(self, file_id: int, project_id: int):
        self._request("DELETE", f"/files/{file_id}", "delete file")
        self._invalidate(("projects", project_id, "files"))
        self.cache.invalidate_prefix(("files", file_id))
        for kind in ("file_versions", "file_activities", "comments"):
            self.cache.invalidate_prefix((kind,))

    # ---------- file versions ----------

    def list_file_versions(self, file_id: int):
        return self._cached_get(("files", file_id, "versions"), f"/file_versions/file/{file_id}", "load versions")

    def get_file_version(self, version_id: int):
        return self._cached_get(("file_versions", version_id), f"/file_versions/{version_id}", "load version")

    def create_file_version(self, file_id: int, project_id: int, data: Dict[str, Any]):
        version = self._request("POST", f"/file_versions/file/{file_id}", "create version", json=data)
        self._invalidate(
            ("files", file_id, "versions"), ("files", file_id), ("files", file_id, "activities"),
            ("projects", project_id, "files"),
        )
        return version

    def update_file_version(self, version_id: int, data: Dict[str, Any]):
        version = self._request("PATCH", f"/file_versions/{version_id}", "update version", json=data)
        self._invalidate(("files", version["file_id"], "versions"), ("file_versions", version_id))
        return version

    def delete_file_version(self, version_id: int, file_id: int, project_id: int):
        self._request("DELETE", f"/file_versions/{version_id}", "delete version")
        self._invalidate(
            ("files", file_id, "versions"), ("file_versions", version_id), ("files", file_id),
            ("projects", project_id, "files"),
        )

    # ---------- file activities ----------

    def list_file_activities(self, file_id: int):
        return self._cached_get(
            ("files", file_id, "activities"), f"/file_activities/file/{file_id}", "load activities"
        )

    def get_file_activity(self, activity_id: int):
        return self._cached_get(
            ("file_activities", activity_id), f"/file_activities/{activity_id}", "load activity"
        )

    def create_file_activity(self, file_id: int, data: Dict[str, Any]):
        activity = self._request("POST", f"/file_activities/file/{file_id}", "log activity", json=data)
        self._invalidate(("files", file_id, "activities"))
        return activity

    def update_file_activity(self, activity_id: int, data: Dict[str, Any]):
        activity = self._request("PATCH", f"/file_activities/{activity_id}", "update activity", json=data)
        self._invalidate(("files", activity["file_id"], "activities"), ("file_activities", activity_id))
        return activity

    def delete_file_activity(self, activity_id: int, file_id: int):
        self._request("DELETE", f"/file_activities/{activity_id}", "delete activity")
        self._invalidate(("files", file_id, "activities"), ("file_activities", activity_id))

    # ---------- comments ----------

    def list_task_comments(self, task_id: int):
        return self._cached_get(("tasks", task_id, "comments"), f"/comments/task/{task_id}", "load comments")

    def list_file_comments(self, file_id: int):
        return self._cached_get(("files", file_id, "comments"), f"/comments/file/{file_id}", "load comments")

    def get_comment(self, comment_id: int):
        return self._cached_get(("comments", comment_id), f"/comments/{comment_id}", "load comment")

    def _invalidate_comment_scopes(self, comment: Dict[str, Any]) -> None:
        if comment.get("task_id"):
            self._invalidate(("tasks", comment["task_id"], "comments"))
        if comment.get("file_id"):
            self._invalidate(("files", comment["file_id"], "comments"))

    def create_comment(self, data: Dict[str, Any]):
        comment = self._request("POST", "/comments/", "create comment", json=data)
        self._invalidate_comment_scopes(comment)
        return comment

    def update_comment(self, comment_id: int, data: Dict[str, Any]):
        comment = self._request("PATCH", f"/comments/{comment_id}", "update comment", json=data)
        self._invalidate_comment_scopes(comment)
        self._invalidate(("comments", comment_id))
        return comment

    def delete_comment(self, comment_id: int, task_id: Optional[int] = None, file_id: Optional[int] = None):
        self._request("DELETE", f"/comments/{comment_id}", "delete comment")
        self._invalidate_comment_scopes({"task_id": task_id, "file_id": file_id})
        self._invalidate(("comments", comment_id))
