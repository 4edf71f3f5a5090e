"""Upload coordination: local validation, one bounded call, library update.

Preconditions are checked before anything touches the network. Only a
successful response adds a library entry; the file-selection reset hook runs
after every attempt.
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from edubot.client.api import ServiceClient
from edubot.client.outcomes import Outcome, OutcomeKind
from edubot.config import ClientConfig
from edubot.library.documents import DocumentLibrary
from edubot.models.schemas import DocumentEntry, UploadReply, utcnow

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "General"


class UploadRejection(str, Enum):
    """Why an upload did not produce a library entry."""

    NO_FILE = "no_file"
    NOT_PDF = "not_pdf"
    TOO_LARGE = "too_large"
    BLANK_SUBJECT = "blank_subject"
    VALIDATION = "validation"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    UNAUTHORIZED = "unauthorized"
    REJECTED = "rejected"
    MALFORMED = "malformed"


LOCAL_REJECTIONS = frozenset(
    {
        UploadRejection.NO_FILE,
        UploadRejection.NOT_PDF,
        UploadRejection.TOO_LARGE,
        UploadRejection.BLANK_SUBJECT,
    }
)

_REMOTE_REJECTIONS = {
    OutcomeKind.VALIDATION_ERROR: UploadRejection.VALIDATION,
    OutcomeKind.PAYLOAD_TOO_LARGE: UploadRejection.PAYLOAD_TOO_LARGE,
    OutcomeKind.RATE_LIMITED: UploadRejection.RATE_LIMITED,
    OutcomeKind.SERVER_ERROR: UploadRejection.SERVER_ERROR,
    OutcomeKind.TIMEOUT: UploadRejection.TIMEOUT,
    OutcomeKind.NETWORK_ERROR: UploadRejection.NETWORK_ERROR,
    OutcomeKind.UNAUTHORIZED: UploadRejection.UNAUTHORIZED,
    OutcomeKind.SESSION_EXPIRED: UploadRejection.REJECTED,
    OutcomeKind.MALFORMED: UploadRejection.MALFORMED,
}

_MESSAGES = {
    UploadRejection.NO_FILE: "📂 Please choose a file to upload.",
    UploadRejection.NOT_PDF: "📄 Only PDF files are supported.",
    UploadRejection.TOO_LARGE: "📦 {name} is too large ({size}). The limit is {limit} MB.",
    UploadRejection.BLANK_SUBJECT: "🏷️ Please enter a topic for the file, or leave it empty for General.",
    UploadRejection.VALIDATION: "⚠️ The service rejected the file: {detail}",
    UploadRejection.PAYLOAD_TOO_LARGE: "📦 The file is too large for the service: {detail}",
    UploadRejection.RATE_LIMITED: "⏳ Too many uploads. Please wait a moment and try again.",
    UploadRejection.SERVER_ERROR: "🛠️ The service failed to store the file ({detail}). Please try again.",
    UploadRejection.TIMEOUT: "⏱️ The upload timed out. Please try again.",
    UploadRejection.NETWORK_ERROR: "🌐 Couldn't reach the service. Check your connection and try again.",
    UploadRejection.UNAUTHORIZED: "🔐 You are not allowed to upload files.",
    UploadRejection.REJECTED: "❌ The upload endpoint is not available.",
    UploadRejection.MALFORMED: "🧩 The service sent an unreadable reply to the upload.",
}


class SelectedFile:
    """A file chosen for upload.

    The size is known up front; bytes are only read once the local
    preconditions have passed, so an oversized file is never buffered.
    """

    def __init__(self, name: str, size: int, reader: Callable[[], Awaitable[bytes]]) -> None:
        self.name = name
        self.size = size
        self._reader = reader

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SelectedFile":
        async def read() -> bytes:
            return data

        return cls(name, len(data), read)

    @classmethod
    def from_path(cls, path: str | Path) -> "SelectedFile":
        path = Path(path)
        return cls(path.name, path.stat().st_size, lambda: asyncio.to_thread(path.read_bytes))

    async def read(self) -> bytes:
        return await self._reader()

    def __repr__(self) -> str:
        return f"SelectedFile(name={self.name!r}, size={self.size})"


class UploadResult(BaseModel):
    """What an upload attempt did.

    Attributes:
        reason: None on success, otherwise why no entry was added.
        message: Text to show the user.
        entry: The library entry created on success.
    """

    model_config = ConfigDict(frozen=True)

    reason: UploadRejection | None = None
    message: str
    entry: DocumentEntry | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def local(self) -> bool:
        """True when rejected before any network call."""
        return self.reason in LOCAL_REJECTIONS


def resolve_subject(subject: str | None) -> str | None:
    """Apply the prompt rules to a subject answer.

    A cancelled (None) or empty prompt means the default subject; an
    explicitly entered blank string is invalid and yields None.
    """
    if subject is None or subject == "":
        return DEFAULT_SUBJECT
    subject = subject.strip()
    return subject or None


def _placeholder_id() -> str:
    return f"local-{uuid.uuid4().hex[:12]}"


def _fail(reason: UploadRejection, **fields: Any) -> UploadResult:
    return UploadResult(reason=reason, message=_MESSAGES[reason].format(**fields))


class UploadCoordinator:
    """Uploads PDFs and records them in the document library."""

    def __init__(
        self,
        client: ServiceClient,
        library: DocumentLibrary,
        config: ClientConfig | None = None,
        on_reset: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: Service client used for the upload call.
            library: Library receiving the new entry.
            config: Size limit configuration. Defaults to the client's.
            on_reset: Clears the file-selection control after each attempt.
        """
        self._client = client
        self._library = library
        self._config = config or client.config
        self._on_reset = on_reset

    def check(self, selection: SelectedFile | None, subject: str | None) -> UploadResult | None:
        """Validate preconditions locally.

        Returns:
            The rejection, or None when the upload may proceed.
        """
        if selection is None:
            return _fail(UploadRejection.NO_FILE)
        if not selection.name.lower().endswith(".pdf"):
            return _fail(UploadRejection.NOT_PDF)
        limit = self._config.max_upload_bytes
        if selection.size > limit:
            return _fail(
                UploadRejection.TOO_LARGE,
                name=selection.name,
                size=f"{selection.size / 1024 / 1024:.1f} MB",
                limit=self._config.max_upload_mb,
            )
        if resolve_subject(subject) is None:
            return _fail(UploadRejection.BLANK_SUBJECT)
        return None

    async def upload(self, selection: SelectedFile | None, subject: str | None = None) -> UploadResult:
        """Validate, upload and record one file.

        Args:
            selection: The chosen file, None if nothing was chosen.
            subject: Answer of the topic prompt (None when cancelled).

        Returns:
            UploadResult with the new entry, or the rejection reason.
        """
        try:
            result = await self._upload(selection, subject)
        finally:
            if self._on_reset is not None:
                self._on_reset()

        if result.ok:
            logger.info(f"Uploaded {result.entry.name} as {result.entry.id}")
        elif result.local:
            logger.info(f"Upload rejected locally: {result.reason.value}")
        else:
            logger.warning(f"Upload failed: {result.reason.value}")
        return result

    async def _upload(self, selection: SelectedFile | None, subject: str | None) -> UploadResult:
        rejection = self.check(selection, subject)
        if rejection is not None:
            return rejection

        subject = resolve_subject(subject)
        content = await selection.read()
        outcome = await self._client.upload_document(selection.name, content, subject)

        if not outcome.ok:
            return self._remote_failure(outcome)

        entry = self._build_entry(outcome.payload, selection, subject)
        self._library.add(entry)
        message = outcome.payload.get("message") if isinstance(outcome.payload, dict) else None
        if not isinstance(message, str) or not message.strip():
            message = f"✅ {entry.name} uploaded successfully!"
        return UploadResult(message=message, entry=entry)

    def _remote_failure(self, outcome: Outcome) -> UploadResult:
        reason = _REMOTE_REJECTIONS.get(outcome.kind, UploadRejection.REJECTED)
        return _fail(reason, detail=outcome.message or "unknown error")

    def _build_entry(
        self, payload: dict[str, Any], selection: SelectedFile, subject: str
    ) -> DocumentEntry:
        reply = UploadReply.model_validate(payload)
        dropped = [
            name for name in UploadReply.model_fields
            if payload.get(name) is not None and getattr(reply, name) is None
        ]
        if dropped:
            logger.warning(f"Ignoring unreadable upload metadata: {', '.join(dropped)}")

        return DocumentEntry(
            id=reply.file_id or reply.id or _placeholder_id(),
            name=reply.filename or selection.name,
            subject=reply.subject or subject,
            size_bytes=reply.size if reply.size is not None else selection.size,
            uploaded_at=reply.uploaded_at or reply.created_at or utcnow(),
        )
