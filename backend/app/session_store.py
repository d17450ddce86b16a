# backend/app/session_store.py
from collections import OrderedDict

from core.conversation import ConversationSession

DEFAULT_SESSION_ID = "default"
SESSIONS_MAX = 1024

# In-memory session store: {session_id: ConversationSession}, least recently used first
SESSIONS: "OrderedDict[str, ConversationSession]" = OrderedDict()


def get_session(session_id: str) -> ConversationSession:
    session = SESSIONS.get(session_id)
    if session is None:
        session = ConversationSession(session_id=session_id)
        SESSIONS[session_id] = session
    SESSIONS.move_to_end(session_id)
    if len(SESSIONS) > SESSIONS_MAX:
        SESSIONS.popitem(last=False)
    return session


def reset_sessions() -> None:
    SESSIONS.clear()
