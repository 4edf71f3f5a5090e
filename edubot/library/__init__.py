"""The user's document library and its remote mutations.

Responsibilities:
    - Local mirror of uploaded documents (Active / Deleting)
    - Upload: local precondition checks, bounded call, entry on success
    - Delete: confirmation, optimistic Deleting state, removal or rollback

Every remote failure resolves into one user-facing message; the library is
left consistent on every path.
"""

from edubot.library.delete import DeleteCoordinator, DeleteResult, DeleteResultKind
from edubot.library.documents import DocumentLibrary, DocumentLibraryError
from edubot.library.upload import (
    DEFAULT_SUBJECT,
    SelectedFile,
    UploadCoordinator,
    UploadRejection,
    UploadResult,
)

__all__ = [
    "DEFAULT_SUBJECT",
    "DeleteCoordinator",
    "DeleteResult",
    "DeleteResultKind",
    "DocumentLibrary",
    "DocumentLibraryError",
    "SelectedFile",
    "UploadCoordinator",
    "UploadRejection",
    "UploadResult",
]
