"""
NGCP Models Package.

This package contains the decoded message model and the session context
the decoder mirrors fields into.
"""

from ._context import SessionContext
from ._message import DecodedMessage

__all__ = [
    # Messages
    "DecodedMessage",
    # Context
    "SessionContext",
]
