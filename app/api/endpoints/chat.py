from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List, Optional

from app.core.config import Settings
from app.database import get_session
from app.schemas.chat import ChatSessionCreate, ChatSessionRead, ChatMessageCreate, Message
from app.schemas.dashboard import DashboardView
from app.services.conversation import ConversationSession, SessionRegistry
from app.services.dashboard import collect_dashboard_data, render_dashboard, TAB_PANELS
from app.services.storage import StoreDataSource

router = APIRouter()
settings = Settings()
registry = SessionRegistry(reply_delay=settings.chat_reply_delay, idle_ttl=settings.chat_session_ttl)


def get_registry() -> SessionRegistry:
    return registry


def session_read(chat: ConversationSession) -> ChatSessionRead:
    return ChatSessionRead(id=chat.id, messages=chat.get_messages(), ui_state=chat.get_ui_state())


def get_chat(session_id: str, reg: SessionRegistry = Depends(get_registry)) -> ConversationSession:
    chat = reg.get(session_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Session not found")
    return chat


@router.post("/sessions", response_model=ChatSessionRead, status_code=status.HTTP_201_CREATED)
def create_chat_session(
    session_in: Optional[ChatSessionCreate] = None,
    reg: SessionRegistry = Depends(get_registry),
):
    default_panels = session_in.default_panels if session_in else None
    return session_read(reg.create(default_panels=default_panels))


@router.get("/sessions/{session_id}", response_model=ChatSessionRead)
def get_chat_session(chat: ConversationSession = Depends(get_chat)):
    return session_read(chat)


@router.post("/sessions/{session_id}/messages", response_model=ChatSessionRead)
def send_message(message_in: ChatMessageCreate, chat: ConversationSession = Depends(get_chat)):
    # Texto en blanco: no se añade nada
    chat.submit(message_in.text)
    return session_read(chat)


@router.get("/sessions/{session_id}/messages", response_model=List[Message])
def list_messages(chat: ConversationSession = Depends(get_chat)):
    return chat.get_messages()


@router.get("/sessions/{session_id}/ui_state")
def get_ui_state(chat: ConversationSession = Depends(get_chat)):
    return {tag.value: unlocked for tag, unlocked in chat.get_ui_state().items()}


@router.get("/sessions/{session_id}/dashboard", response_model=DashboardView)
def get_dashboard(
    active_tab: Optional[str] = None,
    project_id: Optional[int] = None,
    file_id: Optional[int] = None,
    chat: ConversationSession = Depends(get_chat),
    session: Session = Depends(get_session),
):
    if active_tab is not None and active_tab not in TAB_PANELS:
        raise HTTPException(status_code=400, detail=f"Unknown tab: {active_tab}")
    ui_state = chat.get_ui_state()
    data = collect_dashboard_data(StoreDataSource(session), ui_state, project_id, file_id)
    return render_dashboard(ui_state, active_tab, data)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chat_session(session_id: str, reg: SessionRegistry = Depends(get_registry)):
    if not reg.discard(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
