"""Ordered, append-only log of conversation turns."""

from collections.abc import Iterable, Iterator

from edubot.models.schemas import Sender, Turn


class ConversationLog:
    """The turns rendered in the chat view, oldest first.

    Written only by the SessionManager. Turns are immutable; the log itself
    only grows, except for a wholesale ``replace`` when history is loaded or
    a new chat starts.
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def append(self, text: str, sender: Sender) -> Turn:
        turn = Turn(text=text, sender=sender)
        self._turns.append(turn)
        return turn

    def replace(self, turns: Iterable[Turn]) -> None:
        self._turns = list(turns)

    def clear(self) -> None:
        self._turns = []

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
