"""
Type definitions for the NGCP control protocol decoder.

This module centralizes the enums, configuration and exception hierarchy
used throughout the package.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Message Classification
# =============================================================================


class Direction(Enum):
    """Which side of the proxy/relay exchange a message belongs to."""

    REQUEST = auto()  # "command" marker, proxy -> relay
    RESPONSE = auto()  # "result" marker, relay -> proxy


class Command(Enum):
    """
    Command carried by a message.

    OFFER, ANSWER, DELETE and PING only appear on requests, OK only on
    responses. Ignorable responses (pong, stats, warning, error) are
    reported as UNRECOGNIZED.
    """

    OFFER = auto()
    ANSWER = auto()
    DELETE = auto()
    PING = auto()
    OK = auto()
    UNRECOGNIZED = auto()


# =============================================================================
# Decoder Configuration
# =============================================================================


@dataclass
class DecoderConfig:
    """Configuration for the payload decoder."""

    # Skip over consumed value spans when searching keywords and markers.
    # False falls back to whole-buffer substring search.
    isolate_value_spans: bool = True

    # Commit session context writes only when the whole decode succeeds
    atomic_context: bool = True

    # Clear the session context before each decode
    reset_context: bool = False


# =============================================================================
# Decode Exceptions
# =============================================================================


class DecodeError(Exception):
    """Base exception for payload decoding errors."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class EmptyPayloadError(DecodeError):
    """Raised when the payload has zero length."""

    def __init__(self) -> None:
        super().__init__("empty payload")


class NoCookieError(DecodeError):
    """Raised when no space terminates the leading cookie token."""

    def __init__(self) -> None:
        super().__init__("no space found in payload for cookie extraction")


class UnrecognizedPayloadError(DecodeError):
    """Raised when neither a command nor a result marker is present."""

    def __init__(self) -> None:
        super().__init__("payload carries neither a command nor a result")


class UnsupportedCommandError(DecodeError):
    """Raised for a request without a known command."""

    def __init__(self) -> None:
        super().__init__("unsupported command type")


class UnsupportedResultError(DecodeError):
    """Raised for a response without a known result."""

    def __init__(self) -> None:
        super().__init__("unsupported result type")


class MissingMandatoryFieldError(DecodeError):
    """Raised when a mandatory field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f"no {field.upper()} found", field)


class MalformedFieldError(DecodeError):
    """Raised when no length separator follows a field keyword."""

    def __init__(self, field: str) -> None:
        super().__init__(f"malformed {field.upper()}", field)


class InvalidLengthError(DecodeError):
    """Raised when the length prefix is not a decimal number."""

    def __init__(self, field: str, raw: bytes = b"") -> None:
        super().__init__(f"invalid {field.upper()} length: {raw!r}", field)
        self.raw = raw


class TruncatedValueError(DecodeError):
    """Raised when the declared length runs past the end of the buffer."""

    def __init__(
        self, field: str, declared: Optional[int] = 0, available: int = 0
    ) -> None:
        # None: the length prefix alone has more digits than the buffer length
        shown = "more than the buffer" if declared is None else f"{declared} bytes"
        super().__init__(
            f"truncated {field.upper()}: declared {shown}, "
            f"{available} available",
            field,
        )
        self.declared = declared
        self.available = available


class UnencodablePayloadError(DecodeError):
    """Raised when a str payload cannot be turned back into wire bytes."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"payload cannot be encoded: {reason}")


class AsymmetricNumberPairError(DecodeError):
    """Raised when only one of anumber/bnumber is present."""

    def __init__(self, missing: str) -> None:
        present = "bnumber" if missing == "anumber" else "anumber"
        super().__init__(
            f"missing {missing.upper()} but {present.upper()} is present", missing
        )
        self.missing = missing


# =============================================================================
# Type Aliases
# =============================================================================

PayloadLike = typing.Union[bytes, bytearray, memoryview, str]


__all__ = [
    # Enums
    "Direction",
    "Command",
    # Configuration
    "DecoderConfig",
    # Exceptions
    "DecodeError",
    "EmptyPayloadError",
    "NoCookieError",
    "UnrecognizedPayloadError",
    "UnsupportedCommandError",
    "UnsupportedResultError",
    "MissingMandatoryFieldError",
    "MalformedFieldError",
    "InvalidLengthError",
    "TruncatedValueError",
    "AsymmetricNumberPairError",
    "UnencodablePayloadError",
    # Type aliases
    "PayloadLike",
]
