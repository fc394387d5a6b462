"""
Utility handlers for common capture loop tasks.

This module provides ready-to-use handlers for logging and counting
decode outcomes.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from ._base import DecodeEvent, DecodeHandler
from .._utils import logger

if TYPE_CHECKING:
    from .._models import DecodedMessage


class LoggingHandler(DecodeHandler):
    """
    Handler that logs decode outcomes.

    Logs decoded messages at INFO and failures at WARNING.
    """

    def __init__(self, custom_logger=None, verbose: bool = True):
        """
        Initialize logging handler.

        Args:
            custom_logger: Optional custom logger instance
            verbose: If True, includes identifiers in logs
        """
        self.logger = custom_logger or logger
        self.verbose = verbose

    def on_message(self, message: DecodedMessage, event: DecodeEvent) -> None:
        """Log decoded message."""
        label = f"{message.direction.name} {message.command.name}"
        if message.is_ignorable:
            msg = f"<<< {message.result.upper()} result ignored"
        elif self.verbose:
            msg = f"<<< {label} cookie={message.cookie} call-id={message.call_id}"
        else:
            msg = f"<<< {label}"

        self.logger.info(msg)

    def on_error(self, error: Exception, event: DecodeEvent) -> None:
        """Log decode failure."""
        if self.verbose:
            self.logger.warning(
                f"!!! Error in NGCP payload ({len(event.payload)} bytes): {error}"
            )
        else:
            self.logger.warning(f"!!! Error: {error}")


class StatsHandler(DecodeHandler):
    """
    Handler that counts decode outcomes.

    Keeps per-kind counters of decoded messages, ignored results and
    failures by exception type.
    """

    def __init__(self):
        self.messages: Counter[str] = Counter()
        self.ignored: Counter[str] = Counter()
        self.errors: Counter[str] = Counter()

    def on_message(self, message: DecodedMessage, event: DecodeEvent) -> None:
        """Count decoded message."""
        if message.is_ignorable:
            self.ignored[message.result] += 1
        else:
            self.messages[f"{message.direction.name} {message.command.name}"] += 1

    def on_error(self, error: Exception, event: DecodeEvent) -> None:
        """Count failure by exception type."""
        self.errors[type(error).__name__] += 1

    @property
    def total(self) -> int:
        """Number of payloads seen."""
        return (
            sum(self.messages.values())
            + sum(self.ignored.values())
            + sum(self.errors.values())
        )

    def reset(self) -> None:
        self.messages.clear()
        self.ignored.clear()
        self.errors.clear()
