import logging
import threading
import time
import uuid
from typing import Dict, Iterable, List, Optional

from app.schemas.chat import Message, PanelTag, Sender
from app.services.intent_matcher import match_intent
from app.services.responses import GREETING, RESPONSE_TABLE

logger = logging.getLogger(__name__)

# Señal recibida -> paneles que se desbloquean (el de proyecto siempre acompaña)
SIGNAL_FLAGS: Dict[PanelTag, List[PanelTag]] = {
    PanelTag.PROJECT_SETUP: [PanelTag.PROJECT_SETUP],
    PanelTag.TEAM_SETUP: [PanelTag.PROJECT_SETUP, PanelTag.TEAM_SETUP],
    PanelTag.TOOLS_COMPARISON: [PanelTag.PROJECT_SETUP, PanelTag.TOOLS_COMPARISON],
    PanelTag.FILE_MANAGEMENT: [PanelTag.PROJECT_SETUP, PanelTag.FILE_MANAGEMENT],
    PanelTag.VERSION_CONTROL: [PanelTag.PROJECT_SETUP, PanelTag.VERSION_CONTROL],
    PanelTag.PROGRESS_GRAPHS: [PanelTag.PROJECT_SETUP, PanelTag.PROGRESS_GRAPHS],
    PanelTag.IMPORT_EXPORT: [PanelTag.PROJECT_SETUP, PanelTag.IMPORT_EXPORT],
}


def empty_ui_state() -> Dict[PanelTag, bool]:
    return {tag: False for tag in PanelTag}


class ConversationSession:
    """
    One user driving one conversation.

    Messages are append-only and the panel flags only ever go from False to True.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        reply_delay: float = 0.0,
        table=RESPONSE_TABLE,
        default_panels: Optional[Iterable[PanelTag]] = None,
        greeting: Optional[str] = GREETING,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.reply_delay = max(reply_delay, 0.0)
        self.table = table
        self._messages: List[Message] = []
        self._ui_state = empty_ui_state()
        if greeting:
            self._messages.append(Message(text=greeting, sender=Sender.ASSISTANT))
        for tag in default_panels or []:
            self._ui_state[PanelTag(tag)] = True

    def submit(self, text: str) -> Optional[Message]:
        if not text or not text.strip():
            return None

        self._messages.append(Message(text=text, sender=Sender.USER))
        rule = match_intent(text, self.table)

        if self.reply_delay:
            time.sleep(self.reply_delay)

        reply = Message(text=rule.reply, sender=Sender.ASSISTANT)
        self._messages.append(reply)
        if rule.ui is not None:
            self.unlock(rule.ui)
        return reply

    def unlock(self, signal: PanelTag) -> Dict[PanelTag, bool]:
        for tag in SIGNAL_FLAGS[PanelTag(signal)]:
            if not self._ui_state[tag]:
                logger.debug("Session %s unlocked panel %s", self.id, tag.value)
            self._ui_state[tag] = True
        return self.get_ui_state()

    def get_messages(self) -> List[Message]:
        return list(self._messages)

    def get_ui_state(self) -> Dict[PanelTag, bool]:
        return dict(self._ui_state)


class SessionRegistry:
    """
    In-memory sessions, keyed by id. Nothing survives a restart.

    Sessions idle for longer than `idle_ttl` seconds are dropped the next time
    the registry is used; `idle_ttl=None` (or 0) keeps them until discarded.
    """

    def __init__(self, reply_delay: float = 0.0, idle_ttl: Optional[float] = None, clock=time.monotonic):
        self.reply_delay = reply_delay
        self.idle_ttl = idle_ttl or None
        self._clock = clock
        self._sessions: Dict[str, ConversationSession] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        if self.idle_ttl is None:
            return
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.idle_ttl]
        for sid in expired:
            del self._sessions[sid]
            del self._last_seen[sid]
        if expired:
            logger.info("Dropped %d idle chat sessions", len(expired))

    def create(self, default_panels: Optional[Iterable[PanelTag]] = None) -> ConversationSession:
        session = ConversationSession(reply_delay=self.reply_delay, default_panels=default_panels)
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._sessions[session.id] = session
            self._last_seen[session.id] = now
        logger.info("Created chat session %s", session.id)
        return session

    def get(self, session_id: str) -> Optional[ConversationSession]:
        with self._lock:
            now = self._clock()
            self._prune(now)
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_seen[session_id] = now
            return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._sessions.pop(session_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
