from enum import Enum
from pydantic import BaseModel
from typing import Optional, List, Dict


class PanelTag(str, Enum):
    PROJECT_SETUP = "projectSetup"
    TEAM_SETUP = "teamSetup"
    TOOLS_COMPARISON = "toolsComparison"
    FILE_MANAGEMENT = "fileManagement"
    VERSION_CONTROL = "versionControl"
    PROGRESS_GRAPHS = "progressGraphs"
    IMPORT_EXPORT = "importExport"


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    text: str
    sender: Sender

    class Config:
        frozen = True


class ResponseRule(BaseModel):
    """A canned reply selected when any of its trigger patterns matches the input."""

    triggers: List[str]
    reply: str
    ui: Optional[PanelTag] = None

    class Config:
        frozen = True


class ChatSessionCreate(BaseModel):
    default_panels: Optional[List[PanelTag]] = None


class ChatMessageCreate(BaseModel):
    text: str


class ChatSessionRead(BaseModel):
    id: str
    messages: List[Message]
    ui_state: Dict[PanelTag, bool]
