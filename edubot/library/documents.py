"""Local mirror of the user's uploaded documents."""

import logging
from collections.abc import Callable, Iterator

from edubot.models.schemas import DocumentEntry, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentLibraryError(Exception):
    """Raised when a library operation would break its invariants."""

    def __init__(self, message: str, document_id: str | None = None) -> None:
        super().__init__(message)
        self.document_id = document_id


class DocumentLibrary:
    """Documents shown in the sidebar, most recent first.

    Ids are unique. Mutated only by the upload and delete coordinators.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._entries: list[DocumentEntry] = []
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _index(self, document_id: str) -> int | None:
        for i, entry in enumerate(self._entries):
            if entry.id == document_id:
                return i
        return None

    @property
    def entries(self) -> tuple[DocumentEntry, ...]:
        return tuple(self._entries)

    def get(self, document_id: str) -> DocumentEntry | None:
        i = self._index(document_id)
        return None if i is None else self._entries[i]

    def __contains__(self, document_id: object) -> bool:
        return isinstance(document_id, str) and self._index(document_id) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DocumentEntry]:
        return iter(self.entries)

    def add(self, entry: DocumentEntry) -> None:
        """Insert at the front; a re-uploaded id replaces its old entry."""
        i = self._index(entry.id)
        if i is not None:
            logger.info(f"Replacing library entry {entry.id}")
            del self._entries[i]
        self._entries.insert(0, entry)
        self._changed()

    def _set_status(self, document_id: str, status: DocumentStatus) -> DocumentEntry:
        i = self._index(document_id)
        if i is None:
            raise DocumentLibraryError(f"No document with id {document_id}", document_id)
        entry = self._entries[i].model_copy(update={"status": status})
        self._entries[i] = entry
        self._changed()
        return entry

    def mark_deleting(self, document_id: str) -> DocumentEntry:
        entry = self.get(document_id)
        if entry is not None and entry.status is DocumentStatus.DELETING:
            raise DocumentLibraryError(
                f"Document {document_id} is already being deleted", document_id
            )
        return self._set_status(document_id, DocumentStatus.DELETING)

    def restore(self, document_id: str) -> DocumentEntry | None:
        """Put an entry back to Active; no-op if it is gone."""
        if document_id not in self:
            return None
        return self._set_status(document_id, DocumentStatus.ACTIVE)

    def remove(self, document_id: str) -> DocumentEntry | None:
        i = self._index(document_id)
        if i is None:
            return None
        entry = self._entries.pop(i)
        self._changed()
        return entry
