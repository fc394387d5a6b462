"""Utilities and constants for the NGCP control protocol."""

import logging
from rich.console import Console
from rich.logging import RichHandler

# Rich Console for pretty printing
console = Console()

# Configure logging with RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
)

# Get logger for the package
logger = logging.getLogger("ngcpx")

# Wire text is bytes; surrogateescape keeps non UTF-8 octets round-trippable
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

SPACE = b" "
COLON = b":"
LIST_START = b"l"
LIST_END = b"e"

# Top-level markers
COMMAND = "command"
RESULT = "result"

# Request commands in match priority order
COMMANDS = ("offer", "answer", "delete", "ping")

# Result words that carry nothing actionable, in match priority order
IGNORABLE_RESULTS = ("pong", "stats", "warning", "error")
RESULT_OK = "ok"

# Field keywords
FROM_TAG = "from-tag"
TO_TAG = "to-tag"
ANUMBER = "anumber"
BNUMBER = "bnumber"
SIPIP = "sipip"
RECEIVED_FROM = "received-from"
CALL_ID = "call-id"
SDP = "sdp"

FIELD_KEYWORDS = (
    FROM_TAG,
    TO_TAG,
    ANUMBER,
    BNUMBER,
    SIPIP,
    RECEIVED_FROM,
    CALL_ID,
    SDP,
)


def to_text(value: bytes) -> str:
    """Decode wire bytes without losing any octet."""
    return value.decode(ENCODING, ENCODING_ERRORS)


def to_wire(value: str) -> bytes:
    """Inverse of :func:`to_text`."""
    return value.encode(ENCODING, ENCODING_ERRORS)
