"""Response classification for remote service calls.

Maps a settled call (status code + body, or the transport exception) to
exactly one Outcome. Pure and total: no I/O, no logging, never raises.
Unparseable error bodies degrade to a generic message.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx

from edubot.client.outcomes import Outcome, OutcomeKind

RAW_PREVIEW_CHARS = 500

ANSWER_FIELDS = ("result", "answer", "message")

# Predicate deciding whether a parsed 2xx body has the expected shape.
# None accepts any body, including an empty or non-JSON one.
ShapeCheck = Callable[[Any], bool] | None

_UNPARSED = object()


def has_answer(body: Any) -> bool:
    """Chat replies must name at least one answer field."""
    return isinstance(body, dict) and any(f in body for f in ANSWER_FIELDS)


def is_object(body: Any) -> bool:
    return isinstance(body, dict)


def is_history(body: Any) -> bool:
    """History is a list, or an object wrapping one."""
    if isinstance(body, list):
        return True
    return isinstance(body, dict) and any(
        isinstance(body.get(key), list) for key in ("messages", "history")
    )


def _decode(body: bytes | str | None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _parse(text: str) -> Any:
    if not text.strip():
        return _UNPARSED
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return _UNPARSED


def extract_detail(parsed: Any) -> str | None:
    """Pull a server-supplied error message out of a parsed error body.

    Understands ``{"detail": "..."}``, FastAPI validation lists
    ``{"detail": [{"msg": "..."}]}``, and ``message``/``error`` fields.
    """
    if not isinstance(parsed, dict):
        return None

    detail = parsed.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail.strip()
    if isinstance(detail, list):
        msgs = [
            str(item["msg"])
            for item in detail
            if isinstance(item, dict) and item.get("msg")
        ]
        if msgs:
            return "; ".join(msgs)

    for key in ("message", "error"):
        value = parsed.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def classify_response(
    status_code: int,
    body: bytes | str | None,
    accepts: ShapeCheck = is_object,
) -> Outcome:
    """Classify a completed HTTP response.

    Args:
        status_code: HTTP status of the response.
        body: Raw response body.
        accepts: Shape check for 2xx bodies; None accepts anything.

    Returns:
        The single Outcome describing the response.
    """
    text = _decode(body)
    parsed = _parse(text)

    if 200 <= status_code < 300:
        if accepts is None:
            payload = {} if parsed is _UNPARSED else parsed
            return Outcome.success(payload, status_code)
        if parsed is not _UNPARSED and accepts(parsed):
            return Outcome.success(parsed, status_code)
        return Outcome.malformed(text[:RAW_PREVIEW_CHARS], status_code)

    detail = None if parsed is _UNPARSED else extract_detail(parsed)

    if status_code == 404:
        return Outcome.failure(OutcomeKind.SESSION_EXPIRED, detail, status_code)
    if status_code in (401, 403):
        return Outcome.failure(OutcomeKind.UNAUTHORIZED, detail, status_code)
    if status_code in (400, 422):
        return Outcome.failure(
            OutcomeKind.VALIDATION_ERROR,
            detail or "The request was rejected as invalid",
            status_code,
        )
    if status_code == 413:
        return Outcome.failure(
            OutcomeKind.PAYLOAD_TOO_LARGE,
            detail or "The file is larger than the service accepts",
            status_code,
        )
    if status_code == 429:
        return Outcome.failure(OutcomeKind.RATE_LIMITED, detail, status_code)
    if status_code >= 500:
        return Outcome.failure(
            OutcomeKind.SERVER_ERROR, detail or f"HTTP {status_code}", status_code
        )
    if 400 <= status_code < 500:
        return Outcome.failure(
            OutcomeKind.VALIDATION_ERROR,
            detail or f"Request rejected (HTTP {status_code})",
            status_code,
        )
    return Outcome.malformed(text[:RAW_PREVIEW_CHARS], status_code)


def classify_error(error: BaseException) -> Outcome:
    """Classify a transport-level failure (no response received).

    Timeouts, whether raised by httpx or by the surrounding wait bound,
    become TIMEOUT. Everything else is a NETWORK_ERROR.
    """
    if isinstance(error, (TimeoutError, httpx.TimeoutException)):
        return Outcome.failure(OutcomeKind.TIMEOUT, "The request timed out")
    reason = str(error) or type(error).__name__
    return Outcome.failure(OutcomeKind.NETWORK_ERROR, f"Connection failed: {reason}")
