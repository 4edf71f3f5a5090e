"""Typed result of one remote call attempt."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class OutcomeKind(str, Enum):
    """Tag of the Outcome variant."""

    SUCCESS = "success"
    SESSION_EXPIRED = "session_expired"
    UNAUTHORIZED = "unauthorized"
    VALIDATION_ERROR = "validation_error"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    MALFORMED = "malformed"


SESSION_LOSS = frozenset({OutcomeKind.SESSION_EXPIRED, OutcomeKind.UNAUTHORIZED})


class Outcome(BaseModel):
    """Classified result of a remote call.

    Exactly one kind per response. Only the fields meaningful for the kind
    are set: ``payload`` for SUCCESS, ``message`` for the error kinds that
    carry text, ``raw`` for MALFORMED.

    Attributes:
        kind: Variant tag.
        status_code: HTTP status when a response was received.
        payload: Parsed JSON body of a successful response.
        message: Human-readable detail (server-supplied or generic).
        raw: Unrecognized body text, truncated.
    """

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    status_code: int | None = None
    payload: Any = None
    message: str | None = None
    raw: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def session_lost(self) -> bool:
        return self.kind in SESSION_LOSS

    @classmethod
    def success(cls, payload: Any, status_code: int | None = None) -> "Outcome":
        return cls(kind=OutcomeKind.SUCCESS, payload=payload, status_code=status_code)

    @classmethod
    def failure(
        cls,
        kind: OutcomeKind,
        message: str | None = None,
        status_code: int | None = None,
    ) -> "Outcome":
        return cls(kind=kind, message=message, status_code=status_code)

    @classmethod
    def malformed(cls, raw: str, status_code: int | None = None) -> "Outcome":
        return cls(kind=OutcomeKind.MALFORMED, raw=raw, status_code=status_code)
