"""Delete coordination with optimistic Deleting state and rollback.

The entry is marked Deleting before the call and, once the call settles, is
either removed (success, or 404 meaning already gone) or put back to Active.
Both branches live in ``delete`` so the compensation sits next to the
forward change.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from edubot.client.api import ServiceClient
from edubot.client.outcomes import Outcome, OutcomeKind
from edubot.library.documents import DocumentLibrary
from edubot.models.schemas import DocumentStatus

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool | Awaitable[bool]]


class DeleteResultKind(str, Enum):
    """How a delete request ended."""

    REMOVED = "removed"
    ALREADY_DELETED = "already_deleted"
    CANCELLED = "cancelled"
    UNKNOWN_DOCUMENT = "unknown_document"
    BUSY = "busy"
    UNAUTHORIZED = "unauthorized"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    FAILED = "failed"


_REVERTED = {
    OutcomeKind.UNAUTHORIZED: DeleteResultKind.UNAUTHORIZED,
    OutcomeKind.SERVER_ERROR: DeleteResultKind.SERVER_ERROR,
    OutcomeKind.TIMEOUT: DeleteResultKind.TIMEOUT,
    OutcomeKind.NETWORK_ERROR: DeleteResultKind.NETWORK_ERROR,
}

_MESSAGES = {
    DeleteResultKind.REMOVED: "🗑️ {name} deleted.",
    DeleteResultKind.ALREADY_DELETED: "ℹ️ {name} was already deleted.",
    DeleteResultKind.CANCELLED: "Deletion cancelled.",
    DeleteResultKind.UNKNOWN_DOCUMENT: "🔍 That document is no longer in your library.",
    DeleteResultKind.BUSY: "⏳ {name} is already being deleted.",
    DeleteResultKind.UNAUTHORIZED: "🔐 You are not authorized to delete {name}.",
    DeleteResultKind.SERVER_ERROR: "🛠️ The service failed to delete {name} ({detail}). Please try again.",
    DeleteResultKind.TIMEOUT: "⏱️ Deleting {name} timed out. Please try again.",
    DeleteResultKind.NETWORK_ERROR: "🌐 Couldn't reach the service to delete {name}.",
    DeleteResultKind.FAILED: "❌ Could not delete {name}: {detail}",
}

# Settled outcomes after which the entry is gone for good
_REMOVING = frozenset({DeleteResultKind.REMOVED, DeleteResultKind.ALREADY_DELETED})


class DeleteResult(BaseModel):
    """What a delete request did.

    Attributes:
        kind: How it ended.
        document_id: The targeted document.
        message: Text to show the user.
    """

    model_config = ConfigDict(frozen=True)

    kind: DeleteResultKind
    document_id: str
    message: str

    @property
    def removed(self) -> bool:
        return self.kind in _REMOVING


def _result(kind: DeleteResultKind, document_id: str, name: str, detail: str = "") -> DeleteResult:
    message = _MESSAGES[kind].format(name=name, detail=detail or "unknown error")
    return DeleteResult(kind=kind, document_id=document_id, message=message)


def _settle(outcome: Outcome) -> DeleteResultKind:
    if outcome.ok:
        return DeleteResultKind.REMOVED
    if outcome.kind is OutcomeKind.SESSION_EXPIRED:
        # 404: the service has no such file any more
        return DeleteResultKind.ALREADY_DELETED
    return _REVERTED.get(outcome.kind, DeleteResultKind.FAILED)


class DeleteCoordinator:
    """Deletes documents from the service and the local library."""

    def __init__(self, client: ServiceClient, library: DocumentLibrary) -> None:
        self._client = client
        self._library = library

    def _gate(self, document_id: str) -> DeleteResult | None:
        entry = self._library.get(document_id)
        if entry is None:
            return _result(DeleteResultKind.UNKNOWN_DOCUMENT, document_id, document_id)
        if entry.status is DocumentStatus.DELETING:
            return _result(DeleteResultKind.BUSY, document_id, entry.name)
        return None

    async def delete(self, document_id: str, confirm: Confirm) -> DeleteResult:
        """Ask for confirmation, then delete one document.

        Args:
            document_id: Id of the library entry.
            confirm: Asked with the document name; may be sync or async.

        Returns:
            DeleteResult describing what happened to the entry.
        """
        blocked = self._gate(document_id)
        if blocked is not None:
            return blocked

        name = self._library.get(document_id).name
        answer = confirm(name)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            return _result(DeleteResultKind.CANCELLED, document_id, name)

        # The library may have changed while the user was deciding
        blocked = self._gate(document_id)
        if blocked is not None:
            return blocked

        self._library.mark_deleting(document_id)
        kind = DeleteResultKind.FAILED
        detail = ""
        try:
            outcome = await self._client.delete_document(document_id)
            kind = _settle(outcome)
            detail = outcome.message or ""
        finally:
            if kind in _REMOVING:
                self._library.remove(document_id)
            else:
                self._library.restore(document_id)

        if kind in _REMOVING:
            logger.info(f"Deleted {document_id} ({kind.value})")
        else:
            logger.warning(f"Delete of {document_id} failed: {kind.value}")
        return _result(kind, document_id, name, detail)
