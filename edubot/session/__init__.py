"""Conversation state and the session lifecycle.

Responsibilities:
    - Session id and lifecycle state (Unbound, Bound, Expired, Rebinding)
    - Append-only conversation log of timestamped turns
    - Single-flight submission with outcome-to-turn mapping
    - Transparent reconnect after session expiry
    - Offline fallback answers and best-effort history restore

The SessionManager is the only writer of session and log state.
"""

from edubot.session.conversation import ConversationLog
from edubot.session.fallback import synthesize_fallback
from edubot.session.history import load_history
from edubot.session.manager import SessionManager, SubmitPhase, SubmitStatus
from edubot.session.store import SessionStateError, SessionStore

__all__ = [
    "ConversationLog",
    "SessionManager",
    "SessionStateError",
    "SessionStore",
    "SubmitPhase",
    "SubmitStatus",
    "load_history",
    "synthesize_fallback",
]
