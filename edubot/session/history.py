"""Best-effort loading of a chat's stored turns from the service."""

import logging
from datetime import UTC
from typing import Any

from pydantic import ValidationError

from edubot.client.api import ServiceClient
from edubot.models.schemas import HistoryRecord, Sender, Turn

logger = logging.getLogger(__name__)


def _records(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    for key in ("messages", "history"):
        value = payload.get(key) if isinstance(payload, dict) else None
        if isinstance(value, list):
            return value
    return []


def to_turns(payload: Any) -> list[Turn]:
    """Convert a history payload to turns, oldest first.

    Role ``user`` maps to the user; every other role is shown as the
    assistant. Records that fail validation are skipped.
    """
    turns: list[Turn] = []
    for raw in _records(payload):
        try:
            record = HistoryRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable history record: {e.error_count()} error(s)")
            continue
        sender = Sender.USER if record.role.lower() == "user" else Sender.ASSISTANT
        timestamp = record.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        turns.append(Turn(text=record.content, sender=sender, timestamp=timestamp))

    turns.sort(key=lambda t: t.timestamp)
    return turns


async def load_history(
    client: ServiceClient,
    session_id: str,
    limit: int,
) -> list[Turn] | None:
    """Fetch up to ``limit`` stored turns of a chat.

    Returns:
        The turns sorted by timestamp, or None when the fetch failed.
    """
    outcome = await client.get_history(session_id, limit)
    if not outcome.ok:
        logger.info(f"History unavailable for {session_id}: {outcome.kind.value}")
        return None
    return to_turns(outcome.payload)[-limit:]
