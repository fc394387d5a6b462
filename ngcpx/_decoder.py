"""
Stateful NGCP payload decoder.

This module provides a Decoder that owns the session context of one
capture stream and reports every outcome to a chain of handlers:
- One SessionContext per decoder, one decode in flight at a time
- Typed failures handed to handlers instead of being printed
- ``feed()`` for log-and-continue capture loops
"""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from ._dissector import _as_buffer, decode
from ._handlers import DecodeEvent, DecodeHandler, HandlerChain
from ._models import DecodedMessage, SessionContext
from ._types import DecodeError, DecoderConfig, PayloadLike


class Decoder:
    """
    NGCP control payload decoder bound to a single session context.

    Example:
        >>> decoder = Decoder()
        >>> msg = decoder.feed(b"C1 command delete call-id2:c1")
        >>> decoder.context.call_id
        'c1'
    """

    def __init__(
        self,
        config: Optional[DecoderConfig] = None,
        context: Optional[SessionContext] = None,
        handlers: Optional[Iterable[DecodeHandler]] = None,
    ) -> None:
        """
        Initialize decoder.

        Args:
            config: Decoder configuration (default: DecoderConfig())
            context: Session context to update (default: a fresh one)
            handlers: Handlers notified of every decode outcome
        """
        self.config = config or DecoderConfig()
        self._context = context if context is not None else SessionContext.fresh()
        self._handlers = HandlerChain()
        for handler in handlers or ():
            self._handlers.add_handler(handler)

        # Serializes decode + context mirroring
        self._lock = threading.Lock()

    @property
    def context(self) -> SessionContext:
        """The session context this decoder writes into."""
        return self._context

    @property
    def handlers(self) -> HandlerChain:
        return self._handlers

    def add_handler(self, handler: DecodeHandler) -> None:
        self._handlers.add_handler(handler)

    def remove_handler(self, handler: DecodeHandler) -> None:
        self._handlers.remove_handler(handler)

    def decode(self, payload: PayloadLike) -> DecodedMessage:
        """
        Decode *payload*, notify handlers and return the message.

        Raises:
            DecodeError: After handlers have been notified of the failure
        """
        event = DecodeEvent(payload=b"", session=self._context)
        with self._lock:
            try:
                event.payload = _as_buffer(payload)
                message = decode(event.payload, self._context, self.config)
            except DecodeError as e:
                self._handlers.on_error(e, event)
                raise
        self._handlers.on_message(message, event)
        return message

    def feed(self, payload: PayloadLike) -> Optional[DecodedMessage]:
        """
        Decode *payload*, returning None instead of raising on failure.

        Handlers still see the failure through ``on_error``.
        """
        try:
            return self.decode(payload)
        except DecodeError:
            return None

    def reset(self) -> None:
        """Clear the session context."""
        with self._lock:
            self._context.reset()

    def __repr__(self):
        return (
            f"Decoder(handlers={len(self._handlers)}, "
            f"isolate_value_spans={self.config.isolate_value_spans})"
        )


__all__ = ["Decoder"]
