"""
Session context shared across decode calls.

The context mirrors decoded fields into a SIP-dialog shaped view owned by
the caller. It is never reset implicitly: a field the current message does
not carry keeps whatever an earlier message wrote. Use one context per
capture stream and at most one decode in flight per context.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Optional

from .._types import Command, Direction


@dataclass(slots=True)
class SessionContext:
    """Caller-owned, mutable SIP dialog view updated by the decoder."""

    # Classification of the last decoded message
    last_direction: Optional[Direction] = None
    last_command: Optional[Command] = None

    # SIP dialog view
    method: str = ""  # owned by the SIP side, never written by the decoder
    from_tag: str = ""
    has_from_tag: bool = False
    from_user: str = ""
    to_tag: str = ""
    has_to_tag: bool = False
    ruri_user: str = ""
    ngcp_sip_ip: str = ""
    ngcp_cookie: str = ""
    call_id: str = ""
    body: str = ""
    has_sdp: bool = False

    @classmethod
    def fresh(cls) -> SessionContext:
        """Create an empty context for a new logical session."""
        return cls()

    def reset(self) -> None:
        """Clear every field back to its default."""
        self.update_from(SessionContext())

    def copy(self) -> SessionContext:
        return replace(self)

    def update_from(self, other: SessionContext) -> None:
        """Overwrite every field with the value held by *other*."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))


__all__ = ["SessionContext"]
