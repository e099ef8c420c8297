from typing import Any, Dict, List, Optional

from app.models.task import TASK_STATUSES
from app.schemas.chat import PanelTag
from app.schemas.dashboard import Panel, DashboardView

PANEL_ORDER: List[PanelTag] = [
    PanelTag.PROJECT_SETUP,
    PanelTag.TEAM_SETUP,
    PanelTag.TOOLS_COMPARISON,
    PanelTag.FILE_MANAGEMENT,
    PanelTag.VERSION_CONTROL,
    PanelTag.PROGRESS_GRAPHS,
    PanelTag.IMPORT_EXPORT,
]

TAB_PANELS: Dict[str, PanelTag] = {
    "project": PanelTag.PROJECT_SETUP,
    "team": PanelTag.TEAM_SETUP,
    "tools": PanelTag.TOOLS_COMPARISON,
    "files": PanelTag.FILE_MANAGEMENT,
    "versions": PanelTag.VERSION_CONTROL,
    "graphs": PanelTag.PROGRESS_GRAPHS,
    "importExport": PanelTag.IMPORT_EXPORT,
}

PANEL_TITLES: Dict[PanelTag, str] = {
    PanelTag.PROJECT_SETUP: "Project Dashboard",
    PanelTag.TEAM_SETUP: "Team Management",
    PanelTag.TOOLS_COMPARISON: "Tools Comparison",
    PanelTag.FILE_MANAGEMENT: "File Management",
    PanelTag.VERSION_CONTROL: "Version Control",
    PanelTag.PROGRESS_GRAPHS: "Project Analytics",
    PanelTag.IMPORT_EXPORT: "Import & Export",
}

EMPTY_STATE = "Project details will appear here as you chat"

TOOLS_COMPARISON = [
    {"tool": "Blender", "price": "Free", "learning_curve": "Medium", "best_for": "All-round modeling and animation"},
    {"tool": "Maya", "price": "Subscription", "learning_curve": "Steep", "best_for": "Character animation and rigging"},
    {"tool": "ZBrush", "price": "Subscription", "learning_curve": "Steep", "best_for": "High-detail sculpting"},
    {"tool": "Substance Painter", "price": "Subscription", "learning_curve": "Medium", "best_for": "PBR texturing"},
]

EXPORT_FORMATS = [
    {"format": "FBX", "description": "Models with rigs and animation"},
    {"format": "OBJ", "description": "Simple geometry export"},
    {"format": "glTF", "description": "Web and real-time engines"},
    {"format": "USD", "description": "Scene interchange between tools"},
]


def _row(item) -> Dict[str, Any]:
    if isinstance(item, dict):
        return item
    return item.model_dump()


def progress_summary(tasks: List[Any], milestones: List[Any]) -> Dict[str, Any]:
    tasks = [_row(t) for t in tasks]
    milestones = [_row(m) for m in milestones]
    by_status = {status: 0 for status in TASK_STATUSES}
    for task in tasks:
        status = task.get("status") or "todo"
        by_status[status] = by_status.get(status, 0) + 1
    total = len(tasks)
    done = by_status.get("done", 0)
    return {
        "tasks_total": total,
        "tasks_by_status": by_status,
        "percent_done": round(100.0 * done / total, 1) if total else 0.0,
        "milestones_total": len(milestones),
        "milestones_completed": sum(1 for m in milestones if m.get("completed")),
    }


def collect_dashboard_data(
    source,
    ui_state: Dict[PanelTag, bool],
    project_id: Optional[int] = None,
    file_id: Optional[int] = None,
) -> Dict[PanelTag, Dict[str, Any]]:
    """
    Pide a `source` (CrudGateway o StoreDataSource) solo lo que necesitan
    los paneles desbloqueados.
    """
    data: Dict[PanelTag, Dict[str, Any]] = {}
    if ui_state.get(PanelTag.PROJECT_SETUP):
        content: Dict[str, Any] = {"projects": [_row(p) for p in source.list_projects()]}
        if project_id is not None:
            content["milestones"] = [_row(m) for m in source.list_milestones(project_id)]
        data[PanelTag.PROJECT_SETUP] = content
    if project_id is None:
        return data

    if ui_state.get(PanelTag.TEAM_SETUP):
        members = []
        for m in source.list_members(project_id):
            m = _row(m)
            user = m.get("user") or {}
            members.append({
                "user_id": m.get("user_id"),
                "full_name": m.get("full_name") or user.get("full_name"),
                "role": m.get("role"),
            })
        data[PanelTag.TEAM_SETUP] = {"members": members}
    if ui_state.get(PanelTag.FILE_MANAGEMENT):
        data[PanelTag.FILE_MANAGEMENT] = {"files": [_row(f) for f in source.list_files(project_id)]}
    if ui_state.get(PanelTag.VERSION_CONTROL) and file_id is not None:
        data[PanelTag.VERSION_CONTROL] = {
            "file_id": file_id,
            "versions": [_row(v) for v in source.list_file_versions(file_id)],
        }
    if ui_state.get(PanelTag.PROGRESS_GRAPHS):
        data[PanelTag.PROGRESS_GRAPHS] = progress_summary(
            source.list_tasks(project_id), source.list_milestones(project_id)
        )
    return data


def _panel(tag: PanelTag, data: Dict[PanelTag, Dict[str, Any]]) -> Panel:
    content = dict(data.get(tag, {}))
    if tag == PanelTag.TOOLS_COMPARISON:
        content.setdefault("tools", TOOLS_COMPARISON)
    elif tag == PanelTag.IMPORT_EXPORT:
        content.setdefault("export_formats", EXPORT_FORMATS)
    return Panel(tag=tag, title=PANEL_TITLES[tag], content=content)


def render_dashboard(
    ui_state: Dict[PanelTag, bool],
    active_tab: Optional[str] = None,
    data: Optional[Dict[PanelTag, Dict[str, Any]]] = None,
) -> DashboardView:
    data = data or {}
    if active_tab is not None:
        if active_tab not in TAB_PANELS:
            raise ValueError(f"Unknown tab: {active_tab}")
        tag = TAB_PANELS[active_tab]
        tags = [tag] if ui_state.get(tag) else []
        title = PANEL_TITLES[tag]
    else:
        tags = [tag for tag in PANEL_ORDER if ui_state.get(tag)]
        title = PANEL_TITLES[PanelTag.PROJECT_SETUP]

    if not tags:
        return DashboardView(title=title, panels=[], empty=True, placeholder=EMPTY_STATE)
    return DashboardView(title=title, panels=[_panel(tag, data) for tag in tags])
