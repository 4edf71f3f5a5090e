"""Holder of the current Session snapshot.

Each transition swaps in a new frozen Session; the id/state pair is never
updated piecemeal. Illegal transitions raise SessionStateError.
"""

import logging

from edubot.models.schemas import Session, SessionState

logger = logging.getLogger(__name__)


class SessionStateError(RuntimeError):
    """Raised on a transition the session lifecycle does not allow."""


class SessionStore:
    """Current session of one conversation.

    Transitions:
        bind:            Unbound | Bound     -> Bound (new id)
        reassign:        Bound               -> Bound (server-issued id)
        expire:          Bound | Expired     -> Expired (id cleared)
        begin_rebinding: Expired             -> Rebinding (new id)
        finish_rebinding: Rebinding          -> Bound
    """

    def __init__(self) -> None:
        self._session = Session()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def session_id(self) -> str | None:
        return self._session.id

    def _require(self, *allowed: SessionState) -> None:
        if self._session.state not in allowed:
            raise SessionStateError(
                f"Cannot transition from {self._session.state.value!r}; "
                f"expected one of {[s.value for s in allowed]}"
            )

    def _swap(self, session: Session) -> Session:
        logger.debug(
            f"Session {self._session.state.value} -> {session.state.value} ({session.id})"
        )
        self._session = session
        return session

    def bind(self, session_id: str) -> Session:
        self._require(SessionState.UNBOUND, SessionState.BOUND)
        return self._swap(Session(id=session_id, state=SessionState.BOUND))

    def reassign(self, session_id: str) -> Session:
        self._require(SessionState.BOUND)
        return self._swap(Session(id=session_id, state=SessionState.BOUND))

    def expire(self) -> Session:
        self._require(SessionState.BOUND, SessionState.EXPIRED)
        return self._swap(Session(state=SessionState.EXPIRED))

    def begin_rebinding(self, session_id: str) -> Session:
        self._require(SessionState.EXPIRED)
        return self._swap(Session(id=session_id, state=SessionState.REBINDING))

    def finish_rebinding(self) -> Session:
        self._require(SessionState.REBINDING)
        return self._swap(Session(id=self._session.id, state=SessionState.BOUND))

    def reset(self) -> Session:
        return self._swap(Session())
