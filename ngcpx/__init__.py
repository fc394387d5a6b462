"""ngcpx - NGCP control protocol payload decoder for Python."""

from __future__ import annotations

# Decoder
from ._decoder import Decoder
from ._dissector import decode, dissect_request, dissect_response

# Scanner and classifier
from ._classifier import MessageKind, classify
from ._scanner import (
    Field,
    FieldIndex,
    SpanFieldIndex,
    SubstringFieldIndex,
    build_index,
    extract_cookie,
    scan,
)

# Handler system
from ._handlers import (
    DecodeEvent,
    DecodeHandler,
    HandlerChain,
    LoggingHandler,
    StatsHandler,
)

# Models
from ._models import DecodedMessage, SessionContext

# Types
from ._types import (
    AsymmetricNumberPairError,
    Command,
    DecodeError,
    DecoderConfig,
    Direction,
    EmptyPayloadError,
    InvalidLengthError,
    MalformedFieldError,
    MissingMandatoryFieldError,
    NoCookieError,
    TruncatedValueError,
    UnrecognizedPayloadError,
    UnsupportedCommandError,
    UnsupportedResultError,
    UnencodablePayloadError,
)

# Utilities
from ._utils import FIELD_KEYWORDS, console, logger

__version__ = "0.1.0"

__all__ = [
    # Decoder - Main API
    "Decoder",
    "decode",
    "dissect_request",
    "dissect_response",
    # Scanner
    "scan",
    "extract_cookie",
    "build_index",
    "Field",
    "FieldIndex",
    "SpanFieldIndex",
    "SubstringFieldIndex",
    # Classifier
    "classify",
    "MessageKind",
    # Models
    "DecodedMessage",
    "SessionContext",
    # Handlers
    "DecodeEvent",
    "DecodeHandler",
    "HandlerChain",
    "LoggingHandler",
    "StatsHandler",
    # Types
    "Direction",
    "Command",
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
    # Utilities
    "console",
    "logger",
    "FIELD_KEYWORDS",
    # Metadata
    "__version__",
]
