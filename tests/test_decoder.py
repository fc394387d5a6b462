import logging
import threading
import time

import pytest

from ngcpx import _decoder
from ngcpx import (
    Command,
    DecodeHandler,
    Decoder,
    DecoderConfig,
    HandlerChain,
    LoggingHandler,
    MissingMandatoryFieldError,
    SessionContext,
    StatsHandler,
    UnencodablePayloadError,
    decode,
)

OFFER = b"COOKIE123 command offer from-tag7:abc1234 call-id6:call01"
PONG = b"C9 result pong"
BROKEN = b"C command delete"


class RecordingHandler(DecodeHandler):
    def __init__(self):
        self.messages = []
        self.errors = []

    def on_message(self, message, event):
        self.messages.append((message, event))

    def on_error(self, error, event):
        self.errors.append((error, event))


class ExplodingHandler(DecodeHandler):
    def on_message(self, message, event):
        raise RuntimeError("boom")


def test_decoder_uses_its_own_context():
    decoder = Decoder()
    msg = decoder.decode(OFFER)
    assert msg.command is Command.OFFER
    assert decoder.context.call_id == "call01"


def test_decoder_with_caller_context():
    ctx = SessionContext.fresh()
    decoder = Decoder(context=ctx)
    decoder.decode(OFFER)
    assert ctx.ngcp_cookie == "COOKIE123"


def test_decoder_config_is_applied():
    decoder = Decoder(DecoderConfig(isolate_value_spans=False))
    msg = decoder.decode(b"C command answer from-tag1:a to-tag1:b sdp12:call-id3:bad call-id4:good")
    assert msg.call_id == "bad"


def test_handlers_see_messages_and_errors():
    recorder = RecordingHandler()
    decoder = Decoder(handlers=[recorder])

    decoder.decode(OFFER)
    with pytest.raises(MissingMandatoryFieldError):
        decoder.decode(BROKEN)

    assert len(recorder.messages) == 1
    message, event = recorder.messages[0]
    assert message.cookie == "COOKIE123"
    assert event.payload == OFFER
    assert event.session is decoder.context

    error, event = recorder.errors[0]
    assert isinstance(error, MissingMandatoryFieldError)
    assert event.payload == BROKEN


def test_feed_returns_none_on_failure():
    recorder = RecordingHandler()
    decoder = Decoder(handlers=[recorder])

    assert decoder.feed(BROKEN) is None
    assert decoder.feed(OFFER) is not None
    assert len(recorder.errors) == 1


def test_stats_handler_counts():
    stats = StatsHandler()
    decoder = Decoder(handlers=[stats])

    for payload in (OFFER, OFFER, PONG, BROKEN, b""):
        decoder.feed(payload)

    assert stats.messages["REQUEST OFFER"] == 2
    assert stats.ignored["pong"] == 1
    assert stats.errors["MissingMandatoryFieldError"] == 1
    assert stats.errors["EmptyPayloadError"] == 1
    assert stats.total == 5

    stats.reset()
    assert stats.total == 0


def test_logging_handler(caplog):
    caplog.set_level(logging.INFO, logger="ngcpx")
    decoder = Decoder(handlers=[LoggingHandler()])

    decoder.feed(OFFER)
    decoder.feed(PONG)
    decoder.feed(BROKEN)

    messages = [record.getMessage() for record in caplog.records]
    assert any("REQUEST OFFER" in m and "COOKIE123" in m for m in messages)
    assert any("PONG result ignored" in m for m in messages)
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "CALL-ID" in warnings[0].getMessage()


def test_failing_handler_does_not_stop_chain():
    recorder = RecordingHandler()
    decoder = Decoder(handlers=[ExplodingHandler(), recorder])

    decoder.decode(OFFER)
    assert len(recorder.messages) == 1


def test_handler_chain_management():
    chain = HandlerChain()
    handler = RecordingHandler()
    chain.add_handler(handler)
    assert len(chain) == 1
    chain.remove_handler(handler)
    chain.remove_handler(handler)
    assert len(chain) == 0


def test_reset_clears_context():
    decoder = Decoder()
    decoder.decode(OFFER)
    decoder.reset()
    assert decoder.context == SessionContext.fresh()


def test_huge_length_in_unread_field_is_fed_through():
    stats = StatsHandler()
    decoder = Decoder(handlers=[stats])

    msg = decoder.feed(b"C1 command delete call-id2:c1 sdp" + b"9" * 5000 + b":x")

    assert msg is not None
    assert msg.call_id == "c1"
    assert stats.messages["REQUEST DELETE"] == 1
    assert not stats.errors


def test_huge_length_in_read_field_is_reported():
    stats = StatsHandler()
    decoder = Decoder(handlers=[stats])

    assert decoder.feed(b"C1 command offer from-tag" + b"9" * 5000 + b":abc") is None
    assert stats.errors["TruncatedValueError"] == 1


def test_unencodable_payload_is_reported():
    recorder = RecordingHandler()
    stats = StatsHandler()
    decoder = Decoder(handlers=[stats, recorder])

    assert decoder.feed("C1 command delete call-id2:\ud800x") is None
    assert stats.errors["UnencodablePayloadError"] == 1
    error, event = recorder.errors[0]
    assert isinstance(error, UnencodablePayloadError)
    assert event.payload == b""

    with pytest.raises(UnencodablePayloadError):
        decoder.decode("\udfff")
    assert decoder.context == SessionContext.fresh()


def test_shared_decoder_runs_one_decode_at_a_time(monkeypatch):
    guard = threading.Lock()
    state = {"active": 0, "peak": 0}

    def slow_decode(payload, ctx, config=None):
        with guard:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.005)
        try:
            return decode(payload, ctx, config)
        finally:
            with guard:
                state["active"] -= 1

    monkeypatch.setattr(_decoder, "decode", slow_decode)
    stats = StatsHandler()
    decoder = Decoder(handlers=[stats])
    results = []

    def worker():
        for _ in range(5):
            results.append(decoder.feed(OFFER))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert state["peak"] == 1
    assert len(results) == 40
    assert all(msg is not None for msg in results)
    assert stats.messages["REQUEST OFFER"] == 40
    assert decoder.context.call_id == "call01"
