"""Remote service access for the EduBot client.

Responsibilities:
    - Bounded HTTP calls to the chat, upload, delete and history endpoints
    - Classification of every settled call into a typed Outcome
    - Containment of transport failures (nothing unclassified escapes)

Built on httpx. Holds no conversation or library state.
"""

from edubot.client.api import ServiceClient
from edubot.client.classifier import classify_error, classify_response
from edubot.client.outcomes import Outcome, OutcomeKind

__all__ = [
    "Outcome",
    "OutcomeKind",
    "ServiceClient",
    "classify_error",
    "classify_response",
]
