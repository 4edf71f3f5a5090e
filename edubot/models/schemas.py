"""Domain records and remote payload schemas.

Domain records (Turn, Session, DocumentEntry) are frozen: state changes
produce a new instance so readers never see a half-applied update.
Wire payloads are lenient: every field optional, unknown fields ignored.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)


def utcnow() -> datetime:
    return datetime.now(UTC)


class Sender(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class SessionState(str, Enum):
    """Lifecycle of the remote chat session."""

    UNBOUND = "unbound"
    BOUND = "bound"
    EXPIRED = "expired"
    REBINDING = "rebinding"


class DocumentStatus(str, Enum):
    """Presentation state of a library entry."""

    ACTIVE = "active"
    DELETING = "deleting"


class Turn(BaseModel):
    """A single message in the conversation.

    Attributes:
        text: The message text.
        sender: Who wrote it.
        timestamp: When it was appended (UTC).
    """

    model_config = ConfigDict(frozen=True)

    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=utcnow)


_ID_STATES = {SessionState.BOUND, SessionState.REBINDING}


class Session(BaseModel):
    """Snapshot of the chat session.

    Attributes:
        id: Opaque remote session identifier, None while unbound/expired.
        state: Current lifecycle state.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    state: SessionState = SessionState.UNBOUND

    @model_validator(mode="after")
    def check_id_matches_state(self) -> "Session":
        """An id is present exactly in the Bound and Rebinding states."""
        has_id = bool(self.id)
        if has_id != (self.state in _ID_STATES):
            raise ValueError(
                f"Session in state {self.state.value!r} "
                f"{'must not' if has_id else 'must'} carry an id"
            )
        return self


class DocumentEntry(BaseModel):
    """A document in the local library mirror.

    Attributes:
        id: Remote file id, or a local placeholder when the service gave none.
        name: Original filename.
        subject: Topic/category label chosen at upload time.
        size_bytes: File size in bytes.
        uploaded_at: Upload timestamp.
        status: Active, or Deleting while a delete request is in flight.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    subject: str
    size_bytes: int = Field(ge=0)
    uploaded_at: datetime = Field(default_factory=utcnow)
    status: DocumentStatus = DocumentStatus.ACTIVE

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / 1024 / 1024:.2f} MB"


class _Payload(BaseModel):
    # Numeric ids from the service are accepted as strings
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class ChatReply(_Payload):
    """Successful response of the chat endpoint."""

    result: str | None = None
    answer: str | None = None
    message: str | None = None
    chat_id: str | None = None
    usage: dict[str, Any] | None = None

    @property
    def text(self) -> str | None:
        """First non-blank answer field, in the order the service prefers."""
        for candidate in (self.result, self.answer, self.message):
            if candidate and candidate.strip():
                return candidate
        return None


class UploadReply(_Payload):
    """Successful response of the upload endpoint.

    Each field is read on its own: an unreadable value becomes None instead
    of discarding the rest of the metadata (notably the file id).
    """

    message: str | None = None
    filename: str | None = None
    subject: str | None = None
    size: int | None = Field(None, ge=0)
    file_id: str | None = None
    id: str | None = None
    uploaded_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def drop_unreadable(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class DeleteReply(_Payload):
    """Successful response of the delete endpoint."""

    message: str | None = None


class HistoryRecord(_Payload):
    """One turn of the remote conversation log."""

    role: str
    content: str
    timestamp: datetime
