"""
Request and response dissectors and the decode entry point.

Field rules per request command:

    OFFER   from-tag mandatory; anumber+bnumber together or not at all;
            sipip optional
    ANSWER  from-tag and to-tag mandatory
    DELETE  -
    PING    -

Every request then reads received-from (optional), the cookie and
call-id (mandatory) and, for OFFER and ANSWER only, sdp (optional). OK
responses read the cookie and sdp (optional). A missing optional field
is skipped, a missing mandatory field is an error, and any field that is
present but does not parse is an error either way.
"""

from __future__ import annotations

from typing import Optional

from ._classifier import MessageKind, classify
from ._models import DecodedMessage, SessionContext
from ._scanner import FieldIndex, build_index, extract_cookie
from ._types import (
    AsymmetricNumberPairError,
    Command,
    DecoderConfig,
    Direction,
    EmptyPayloadError,
    MissingMandatoryFieldError,
    PayloadLike,
    UnencodablePayloadError,
)
from ._utils import (
    ANUMBER,
    BNUMBER,
    CALL_ID,
    FROM_TAG,
    RECEIVED_FROM,
    SDP,
    SIPIP,
    TO_TAG,
    logger,
    to_text,
    to_wire,
)

DEFAULT_CONFIG = DecoderConfig()


# ============================================================================
# Field Helpers
# ============================================================================


def _optional(index: FieldIndex, keyword: str) -> Optional[str]:
    field = index.find(keyword)
    if field is None:
        return None
    return to_text(field.value)


def _mandatory(index: FieldIndex, keyword: str) -> str:
    field = index.find(keyword)
    if field is None:
        raise MissingMandatoryFieldError(keyword)
    return to_text(field.value)


def _check_number_pair(index: FieldIndex) -> bool:
    """
    Return True if both anumber and bnumber are present, False if neither.

    Raises:
        AsymmetricNumberPairError: Only one of the two is present
    """
    has_a = ANUMBER in index
    has_b = BNUMBER in index
    if has_a and not has_b:
        raise AsymmetricNumberPairError(BNUMBER)
    if has_b and not has_a:
        raise AsymmetricNumberPairError(ANUMBER)
    return has_a


def _read_cookie(
    buffer: bytes, message: DecodedMessage, ctx: SessionContext
) -> None:
    message.cookie = to_text(extract_cookie(buffer))
    ctx.ngcp_cookie = message.cookie


def _read_sdp(index: FieldIndex, message: DecodedMessage, ctx: SessionContext) -> None:
    sdp = _optional(index, SDP)
    if sdp is None:
        return
    message.sdp_body = sdp
    ctx.body = sdp
    ctx.has_sdp = True


# ============================================================================
# Request Dissector
# ============================================================================


def _dissect_offer(
    index: FieldIndex, message: DecodedMessage, ctx: SessionContext, numbers: bool
) -> None:
    message.from_tag = _mandatory(index, FROM_TAG)
    ctx.from_tag = message.from_tag
    ctx.has_from_tag = True

    if numbers:
        message.a_number = _mandatory(index, ANUMBER)
        message.b_number = _mandatory(index, BNUMBER)
        ctx.from_user = message.a_number

    sip_ip = _optional(index, SIPIP)
    if sip_ip is not None:
        message.sip_ip = sip_ip
        ctx.ngcp_sip_ip = sip_ip


def _dissect_answer(
    index: FieldIndex, message: DecodedMessage, ctx: SessionContext
) -> None:
    message.from_tag = _mandatory(index, FROM_TAG)
    ctx.from_tag = message.from_tag
    ctx.has_from_tag = True

    message.to_tag = _mandatory(index, TO_TAG)
    ctx.to_tag = message.to_tag
    ctx.has_to_tag = True


def dissect_request(
    buffer: bytes,
    index: FieldIndex,
    message: DecodedMessage,
    ctx: SessionContext,
) -> DecodedMessage:
    """
    Populate *message* and *ctx* from a classified request payload.

    Fields are read in a single pass in this order: the anumber/bnumber
    pairing check, command specific fields, received-from, cookie,
    call-id and finally sdp.
    """
    numbers = _check_number_pair(index)

    if message.command is Command.OFFER:
        _dissect_offer(index, message, ctx, numbers)
    elif message.command is Command.ANSWER:
        _dissect_answer(index, message, ctx)
    else:
        logger.debug(f"{message.command.name} command found")

    field = index.find(RECEIVED_FROM)
    if field is None:
        logger.debug("no RECEIVED-FROM found, ignoring it")
    else:
        message.received_from = to_text(field.value)
        if field.qualifier is not None:
            message.received_from_family = to_text(field.qualifier)
        ctx.ruri_user = message.received_from

    _read_cookie(buffer, message, ctx)

    message.call_id = _mandatory(index, CALL_ID)
    ctx.call_id = message.call_id

    if message.command in (Command.OFFER, Command.ANSWER):
        _read_sdp(index, message, ctx)

    return message


# ============================================================================
# Response Dissector
# ============================================================================


def dissect_response(
    buffer: bytes,
    index: FieldIndex,
    message: DecodedMessage,
    ctx: SessionContext,
) -> DecodedMessage:
    """
    Populate *message* and *ctx* from a classified response payload.

    Ignorable results return immediately without reading any field.
    """
    if message.is_ignorable:
        logger.debug(f"{message.result.upper()} result found, ignoring it")
        return message

    _check_number_pair(index)
    _read_cookie(buffer, message, ctx)
    _read_sdp(index, message, ctx)
    return message


# ============================================================================
# Entry Point
# ============================================================================


def _as_buffer(payload: PayloadLike) -> bytes:
    if isinstance(payload, str):
        try:
            return to_wire(payload)
        except UnicodeEncodeError as e:
            raise UnencodablePayloadError(e.reason) from e
    return bytes(payload)


def decode(
    payload: PayloadLike,
    ctx: SessionContext,
    config: Optional[DecoderConfig] = None,
) -> DecodedMessage:
    """
    Decode one NGCP control payload.

    Args:
        payload: Application layer bytes of exactly one packet
        ctx: Session context to mirror decoded fields into
        config: Decoder configuration (defaults to DecoderConfig())

    Returns:
        A fresh DecodedMessage

    Raises:
        DecodeError: The payload does not decode; no message is returned.
            With ``atomic_context`` (the default) *ctx* is left untouched,
            otherwise it keeps the writes made before the failing field.

    Example:
        >>> ctx = SessionContext.fresh()
        >>> msg = decode(b"C1 command delete call-id2:c1", ctx)
        >>> msg.command
        <Command.DELETE: 3>
    """
    config = config or DEFAULT_CONFIG
    buffer = _as_buffer(payload)
    if not buffer:
        raise EmptyPayloadError()

    index = build_index(buffer, config)
    kind: MessageKind = classify(index.text)
    message = DecodedMessage(
        direction=kind.direction, command=kind.command, result=kind.result
    )

    if config.atomic_context:
        target = SessionContext.fresh() if config.reset_context else ctx.copy()
    else:
        target = ctx
        if config.reset_context:
            ctx.reset()
    target.last_direction = message.direction
    target.last_command = message.command

    if message.direction is Direction.REQUEST:
        dissect_request(buffer, index, message, target)
    else:
        dissect_response(buffer, index, message, target)

    if target is not ctx:
        ctx.update_from(target)
    return message


__all__ = [
    "decode",
    "dissect_request",
    "dissect_response",
]
