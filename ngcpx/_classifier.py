"""Message classification by top-level and secondary markers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ._types import (
    Command,
    Direction,
    UnrecognizedPayloadError,
    UnsupportedCommandError,
    UnsupportedResultError,
)
from ._utils import COMMAND, COMMANDS, IGNORABLE_RESULTS, RESULT, RESULT_OK


@dataclass(frozen=True, slots=True)
class MessageKind:
    """Outcome of classifying a payload."""

    direction: Direction
    command: Command
    result: Optional[str] = None

    @property
    def is_ignorable(self) -> bool:
        """True for pong, stats, warning and error results."""
        return self.result in IGNORABLE_RESULTS


def _first_marker(text: bytes, markers: tuple[str, ...]) -> Optional[str]:
    return next((m for m in markers if m.encode("ascii") in text), None)


def classify(text: bytes) -> MessageKind:
    """
    Classify a payload from the markers found in *text*.

    ``command`` makes a request, whose command is the first of offer,
    answer, delete, ping present. Otherwise ``result`` makes a response:
    pong, stats, warning and error are ignorable, then ``ok``.

    Raises:
        UnsupportedCommandError: Request without a known command
        UnsupportedResultError: Response without a known result
        UnrecognizedPayloadError: Neither marker is present
    """
    if COMMAND.encode("ascii") in text:
        command = _first_marker(text, COMMANDS)
        if command is None:
            raise UnsupportedCommandError()
        return MessageKind(Direction.REQUEST, Command[command.upper()])

    if RESULT.encode("ascii") in text:
        ignorable = _first_marker(text, IGNORABLE_RESULTS)
        if ignorable is not None:
            return MessageKind(Direction.RESPONSE, Command.UNRECOGNIZED, ignorable)
        if RESULT_OK.encode("ascii") in text:
            return MessageKind(Direction.RESPONSE, Command.OK, RESULT_OK)
        raise UnsupportedResultError()

    raise UnrecognizedPayloadError()


__all__ = ["MessageKind", "classify"]
