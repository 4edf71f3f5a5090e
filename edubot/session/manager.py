"""Chat session lifecycle: submit turns, apply outcomes, recover from expiry.

The SessionManager is the single writer of the SessionStore and the
ConversationLog. One submission may be in flight at a time; a session-loss
outcome schedules a delayed, cancellable rebind.
"""

import asyncio
import logging
import random
import uuid
from collections.abc import Callable
from enum import Enum

from pydantic import ValidationError

from edubot import notices
from edubot.client.api import ServiceClient
from edubot.client.outcomes import Outcome, OutcomeKind
from edubot.config import ClientConfig
from edubot.models.schemas import ChatReply, Sender, Session, SessionState, Turn
from edubot.session.conversation import ConversationLog
from edubot.session.fallback import synthesize_fallback
from edubot.session.history import load_history
from edubot.session.store import SessionStore

logger = logging.getLogger(__name__)

# Outcomes answered with a locally synthesized reply
_OFFLINE = frozenset({OutcomeKind.TIMEOUT, OutcomeKind.NETWORK_ERROR, OutcomeKind.MALFORMED})


def new_session_id() -> str:
    return str(uuid.uuid4())


class SubmitPhase(str, Enum):
    """Single-flight guard for chat submissions."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class SubmitStatus(str, Enum):
    """What ``submit`` did with the text it was given."""

    SENT = "sent"
    EMPTY = "empty"
    BUSY = "busy"
    CLOSED = "closed"


class SessionManager:
    """Drives one conversation against the remote service.

    Owns:
        - store: the current Session (id + lifecycle state)
        - log: the ConversationLog rendered by the UI

    Every outcome of a submission ends as exactly one assistant turn; session
    loss additionally runs the reconnect protocol (Expired, then Rebinding,
    then Bound with a new id after ``recovery_delay``).
    """

    def __init__(
        self,
        client: ServiceClient,
        config: ClientConfig | None = None,
        *,
        id_factory: Callable[[], str] = new_session_id,
        rng: random.Random | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            client: Service client used for every outbound call.
            config: Timing configuration. Defaults to the client's.
            id_factory: Generator of fresh session ids.
            rng: Random source for fallback answers.
            on_change: Called after every change to the session or the log.
        """
        self._client = client
        self._config = config or client.config
        self._new_id = id_factory
        self._rng = rng
        self._on_change = on_change

        self.store = SessionStore()
        self.log = ConversationLog()

        self._phase = SubmitPhase.IDLE
        self._recovery: asyncio.Task[None] | None = None
        # Bumped when the conversation is replaced or torn down; replies and
        # recoveries started under an older generation are dropped.
        self._generation = 0
        self._closed = False

    @property
    def session(self) -> Session:
        return self.store.session

    @property
    def turns(self) -> tuple[Turn, ...]:
        return self.log.turns

    @property
    def phase(self) -> SubmitPhase:
        return self._phase

    @property
    def busy(self) -> bool:
        return self._phase is SubmitPhase.IN_FLIGHT

    @property
    def recovering(self) -> bool:
        return self._recovery is not None and not self._recovery.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _say(self, text: str) -> None:
        self.log.append(text, Sender.ASSISTANT)
        self._notify()

    async def start_conversation(
        self,
        session_id: str | None = None,
        *,
        greet: bool = True,
        history_limit: int | None = None,
    ) -> Session:
        """Start (or restart) the conversation on a fresh or given session.

        Args:
            session_id: Resume this chat instead of generating a new id.
            greet: Append the welcome turn (ignored when loading history).
            history_limit: Load up to this many stored turns instead of greeting.

        Returns:
            The new Bound session.
        """
        self._generation += 1
        self._cancel_recovery()
        self.log.clear()
        self.store.reset()
        session = self.store.bind(session_id or self._new_id())
        logger.info(f"Started conversation {session.id}")
        self._notify()

        if history_limit is not None:
            generation = self._generation
            turns = await load_history(self._client, session.id, history_limit)
            if turns and generation == self._generation:
                self.log.replace(turns)
                logger.info(f"Restored {len(turns)} turns for {session.id}")
                self._notify()
        elif greet:
            self._say(notices.GREETING)

        return self.store.session

    async def submit(self, text: str) -> SubmitStatus:
        """Send one user turn and record the reply.

        The user turn is appended before the call; exactly one assistant turn
        follows once the call settles. Blank text and submissions made while
        another is in flight are rejected without touching the log.

        Args:
            text: The user's message.

        Returns:
            SENT once the reply has been recorded, otherwise why nothing happened.
        """
        if self._closed:
            return SubmitStatus.CLOSED
        text = (text or "").strip()
        if not text:
            return SubmitStatus.EMPTY
        if self._phase is SubmitPhase.IN_FLIGHT:
            logger.debug("Submission rejected: another one is in flight")
            return SubmitStatus.BUSY

        self._phase = SubmitPhase.IN_FLIGHT
        try:
            if self.store.state is SessionState.UNBOUND:
                self.store.bind(self._new_id())
            generation = self._generation
            self.log.append(text, Sender.USER)
            self._notify()

            outcome = await self._client.submit_turn(text, self.store.session_id)

            if generation != self._generation:
                logger.info("Dropping reply for a conversation that has been replaced")
            else:
                self._apply(outcome, text)
        finally:
            self._phase = SubmitPhase.IDLE
            self._notify()
        return SubmitStatus.SENT

    def _apply(self, outcome: Outcome, text: str) -> None:
        if outcome.ok:
            try:
                reply = ChatReply.model_validate(outcome.payload)
            except ValidationError:
                logger.warning("Chat reply fields have unexpected types")
                outcome = Outcome.malformed(str(outcome.payload)[:500], outcome.status_code)
            else:
                self._adopt_chat_id(reply.chat_id)
                self._say(reply.text or synthesize_fallback(text, self._rng))
                return

        if outcome.session_lost:
            self._say(notices.session_lost(outcome))
            self._begin_recovery()
        elif outcome.kind in _OFFLINE:
            fallback = synthesize_fallback(text, self._rng)
            self._say(notices.offline_answer(outcome, fallback))
        else:
            self._say(notices.chat_failure(outcome))

    def _adopt_chat_id(self, chat_id: str | None) -> None:
        if not chat_id or chat_id == self.store.session_id:
            return
        if self.store.state is SessionState.BOUND:
            self.store.reassign(chat_id)
            logger.info(f"Service assigned chat id {chat_id}")
        else:
            logger.debug(f"Ignoring chat id {chat_id} while {self.store.state.value}")

    def _begin_recovery(self) -> None:
        if self.recovering:
            logger.debug("Recovery already pending")
            return
        if self.store.state in (SessionState.BOUND, SessionState.EXPIRED):
            self.store.expire()
        logger.info(f"Session expired; rebinding in {self._config.recovery_delay}s")
        self._notify()
        self._recovery = asyncio.create_task(self._recover(self._generation))

    async def _recover(self, generation: int) -> None:
        await asyncio.sleep(self._config.recovery_delay)
        if self._closed or generation != self._generation:
            return
        session = self.store.begin_rebinding(self._new_id())
        self.log.append(notices.SESSION_READY, Sender.ASSISTANT)
        self.store.finish_rebinding()
        logger.info(f"Rebound to session {session.id}")
        self._notify()

    def _cancel_recovery(self) -> None:
        if self._recovery is not None and not self._recovery.done():
            self._recovery.cancel()
        self._recovery = None

    async def wait_for_recovery(self) -> None:
        """Wait until a pending rebind has run (or been cancelled)."""
        if self._recovery is not None:
            await asyncio.wait({self._recovery})

    async def aclose(self) -> None:
        """Tear down: a pending rebind never fires afterwards."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        task = self._recovery
        self._cancel_recovery()
        if task is not None:
            await asyncio.wait({task})
