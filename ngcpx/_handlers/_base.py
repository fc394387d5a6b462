"""
Base classes for decode event handlers.

This module provides the foundational classes the Decoder uses to report
decoded messages and decode failures to the surrounding capture loop.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .._utils import logger

if TYPE_CHECKING:
    from .._models import DecodedMessage, SessionContext


@dataclass
class DecodeEvent:
    """
    Context information passed to decode handlers.

    Contains the raw payload, the session context of the decoder and
    metadata that can be shared between handlers in the chain.
    """

    payload: bytes
    session: Optional[SessionContext] = None

    # Flexible metadata storage for handler communication
    metadata: dict = field(default_factory=dict)


class DecodeHandler(ABC):
    """
    Abstract base class for decode handlers.

    Handlers observe every decode performed by a Decoder. They decide the
    policy for failures (log, count, alert) while the decoder itself only
    reports them. Override the methods you need.
    """

    def on_message(self, message: DecodedMessage, event: DecodeEvent) -> None:
        """
        Called after a payload decoded successfully.

        Args:
            message: The decoded message
            event: Decode event with payload and session context
        """
        pass

    def on_error(self, error: Exception, event: DecodeEvent) -> None:
        """
        Called when a payload fails to decode.

        Args:
            error: The exception that occurred
            event: Decode event at the time of error
        """
        pass


class HandlerChain:
    """
    Chain of decode handlers executed in sequence.

    Handlers are called in the order they were added. An exception raised
    by one handler is logged and does not stop the others.
    """

    def __init__(self):
        """Initialize empty handler chain."""
        self._handlers: list[DecodeHandler] = []

    def add_handler(self, handler: DecodeHandler) -> None:
        """
        Add a handler to the end of the chain.

        Args:
            handler: Decode handler to add
        """
        self._handlers.append(handler)

    def remove_handler(self, handler: DecodeHandler) -> None:
        """
        Remove a handler from the chain.

        Args:
            handler: Decode handler to remove
        """
        if handler in self._handlers:
            self._handlers.remove(handler)

    def clear(self) -> None:
        """Remove all handlers from the chain."""
        self._handlers.clear()

    def on_message(self, message: DecodedMessage, event: DecodeEvent) -> None:
        """Execute all handlers' on_message methods in sequence."""
        for handler in self._handlers:
            try:
                handler.on_message(message, event)
            except Exception as e:
                logger.exception(f"Handler {handler!r} failed: {e}")

    def on_error(self, error: Exception, event: DecodeEvent) -> None:
        """Execute all handlers' on_error methods in sequence."""
        for handler in self._handlers:
            try:
                handler.on_error(error, event)
            except Exception as e:
                logger.exception(f"Handler {handler!r} failed: {e}")

    def __len__(self) -> int:
        """Return number of handlers in chain."""
        return len(self._handlers)
