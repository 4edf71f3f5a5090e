"""Pydantic models for the client domain and the remote service payloads.

Models:
    - Turn: One message in the conversation
    - Session: Remote session id plus lifecycle state
    - DocumentEntry: A document in the local library mirror
    - ChatReply / UploadReply / DeleteReply / HistoryRecord: Remote payloads
"""

from edubot.models.schemas import (
    ChatReply,
    DeleteReply,
    DocumentEntry,
    DocumentStatus,
    HistoryRecord,
    Sender,
    Session,
    SessionState,
    Turn,
    UploadReply,
)

__all__ = [
    "ChatReply",
    "DeleteReply",
    "DocumentEntry",
    "DocumentStatus",
    "HistoryRecord",
    "Sender",
    "Session",
    "SessionState",
    "Turn",
    "UploadReply",
]
