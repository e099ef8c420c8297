from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from app.schemas.chat import PanelTag


class Panel(BaseModel):
    tag: PanelTag
    title: str
    content: Dict[str, Any] = {}


class DashboardView(BaseModel):
    title: str
    panels: List[Panel]
    empty: bool = False
    placeholder: Optional[str] = None
