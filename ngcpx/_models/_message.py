"""
Decoded NGCP control message model.

One DecodedMessage is produced per successfully decoded payload. It is
plain value data: every string is an independent copy of the wire bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from .._types import Command, Direction
from .._utils import IGNORABLE_RESULTS


@dataclass(slots=True)
class DecodedMessage:
    """
    Structured form of a single NGCP control message.

    Requests (``command`` marker) carry the dialog identifiers of the call
    leg; OK responses carry the cookie and, optionally, the rewritten SDP.
    Ignorable responses only carry ``direction``, ``command`` and
    ``result``.
    """

    direction: Direction
    command: Command
    result: Optional[str] = None
    cookie: Optional[str] = None
    call_id: Optional[str] = None
    from_tag: Optional[str] = None
    to_tag: Optional[str] = None
    a_number: Optional[str] = None
    b_number: Optional[str] = None
    sip_ip: Optional[str] = None
    received_from: Optional[str] = None
    received_from_family: Optional[str] = None
    sdp_body: Optional[str] = None

    @property
    def is_request(self) -> bool:
        """True if this is a request (proxy -> relay)."""
        return self.direction is Direction.REQUEST

    @property
    def is_response(self) -> bool:
        """True if this is a response (relay -> proxy)."""
        return self.direction is Direction.RESPONSE

    @property
    def is_ignorable(self) -> bool:
        """True for responses that decode fine but carry nothing actionable."""
        return self.is_response and self.result in IGNORABLE_RESULTS

    @property
    def has_sdp(self) -> bool:
        return self.sdp_body is not None

    def to_dict(self) -> dict[str, Any]:
        """Return present fields as a plain dict, enums by name."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = value.name if isinstance(value, (Direction, Command)) else value
        return data

    def __repr__(self) -> str:
        return (
            f"<DecodedMessage({self.direction.name} {self.command.name}, "
            f"cookie={self.cookie!r}, call_id={self.call_id!r})>"
        )


__all__ = ["DecodedMessage"]
