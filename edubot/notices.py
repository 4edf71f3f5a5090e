"""Chat and session message texts.

Every chat outcome that is not an answer is turned into one of these strings
before it reaches the conversation log.
"""

from edubot.client.outcomes import Outcome, OutcomeKind

GREETING = (
    "Hello and welcome! I'm your intelligent assistant. "
    "How can I help you today? ✨"
)

SESSION_EXPIRED = (
    "⌛ Your chat session has expired. Reconnecting you to a fresh session..."
)
SESSION_UNAUTHORIZED = (
    "🔐 The service no longer recognizes this chat. Reconnecting you to a fresh session..."
)
SESSION_READY = "✅ Reconnected! A new chat session is ready, ask away."

_CHAT_FAILURES = {
    OutcomeKind.VALIDATION_ERROR: "⚠️ Your question could not be processed: {message}",
    OutcomeKind.PAYLOAD_TOO_LARGE: "⚠️ Your question is too long for the service: {message}",
    OutcomeKind.RATE_LIMITED: (
        "⏳ Too many requests. Please wait a moment and try again."
    ),
    OutcomeKind.SERVER_ERROR: (
        "🛠️ The service ran into a problem ({message}). Please try again shortly."
    ),
}

_OFFLINE_PREFIXES = {
    OutcomeKind.TIMEOUT: (
        "⏱️ The service took too long to respond, so here is an offline answer instead:"
    ),
    OutcomeKind.NETWORK_ERROR: (
        "🌐 I couldn't reach the service, so here is an offline answer instead:"
    ),
    OutcomeKind.MALFORMED: (
        "🧩 The service sent a reply I couldn't read, so here is an offline answer instead:"
    ),
}


def session_lost(outcome: Outcome) -> str:
    if outcome.kind is OutcomeKind.UNAUTHORIZED:
        return SESSION_UNAUTHORIZED
    return SESSION_EXPIRED


def chat_failure(outcome: Outcome) -> str:
    """Describe a non-recoverable chat failure class."""
    template = _CHAT_FAILURES.get(outcome.kind, "❌ Error: {message}")
    return template.format(message=outcome.message or "unknown error")


def offline_answer(outcome: Outcome, fallback: str) -> str:
    """Prefix a locally synthesized answer with what went wrong."""
    prefix = _OFFLINE_PREFIXES.get(outcome.kind, _OFFLINE_PREFIXES[OutcomeKind.NETWORK_ERROR])
    return f"{prefix}\n\n{fallback}"
