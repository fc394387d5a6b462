import pytest

from ngcpx import (
    InvalidLengthError,
    MalformedFieldError,
    NoCookieError,
    SpanFieldIndex,
    SubstringFieldIndex,
    TruncatedValueError,
    extract_cookie,
    scan,
)


# ============================================================================
# scan
# ============================================================================


def test_scan_returns_value_of_declared_length():
    assert scan(b"X command offer from-tag7:abc1234 rest", "from-tag") == b"abc1234"


def test_scan_missing_keyword_returns_none():
    assert scan(b"X command offer call-id1:c", "from-tag") is None


def test_scan_zero_length_value():
    assert scan(b"X sdp0: tail", "sdp") == b""


def test_scan_value_may_contain_separators():
    assert scan(b"X sdp9:a:b c:d e", "sdp") == b"a:b c:d e"


def test_scan_without_separator_is_malformed():
    with pytest.raises(MalformedFieldError) as exc_info:
        scan(b"X from-tag7abc1234", "from-tag")
    assert exc_info.value.field == "from-tag"


@pytest.mark.parametrize(
    "payload",
    [
        b"X from-tag:abc",
        b"X from-tagx3:abc",
        b"X from-tag-3:abc",
        b"X from-tag+3:abc",
    ],
)
def test_scan_non_numeric_length_is_invalid(payload):
    with pytest.raises(InvalidLengthError):
        scan(payload, "from-tag")


def test_scan_length_past_end_is_truncated():
    with pytest.raises(TruncatedValueError) as exc_info:
        scan(b"X from-tag10:abc", "from-tag")
    assert exc_info.value.declared == 10
    assert exc_info.value.available == 3


def test_scan_huge_length_is_truncated():
    with pytest.raises(TruncatedValueError) as exc_info:
        scan(b"X from-tag" + b"9" * 5000 + b":abc", "from-tag")
    assert exc_info.value.declared is None
    assert exc_info.value.available == 3


def test_scan_zero_padded_length():
    assert scan(b"X from-tag" + b"0" * 5000 + b"3:abc", "from-tag") == b"abc"


def test_scan_is_case_sensitive():
    assert scan(b"X FROM-TAG3:abc", "from-tag") is None


def test_scan_from_offset():
    buffer = b"X sdp1:a sdp1:b"
    assert scan(buffer, "sdp", start=5) == b"b"


def test_scan_list_value_returns_last_item():
    assert scan(b"X received-froml3:IP49:192.0.2.1e", "received-from") == b"192.0.2.1"


def test_scan_unterminated_list_is_truncated():
    with pytest.raises(TruncatedValueError):
        scan(b"X received-froml3:IP4", "received-from")


def test_scan_empty_list_is_malformed():
    with pytest.raises(MalformedFieldError):
        scan(b"X received-fromle", "received-from")


# ============================================================================
# extract_cookie
# ============================================================================


def test_extract_cookie():
    assert extract_cookie(b"5432_1 command ping") == b"5432_1"


def test_extract_cookie_empty_token():
    assert extract_cookie(b" command ping") == b""


def test_extract_cookie_without_space():
    with pytest.raises(NoCookieError):
        extract_cookie(b"commandping")


# ============================================================================
# Field indexes
# ============================================================================


NESTED = b"C command answer sdp12:call-id3:bad call-id4:good"


def test_span_index_skips_keywords_inside_values():
    index = SpanFieldIndex(NESTED)
    assert index.find("call-id").value == b"good"
    assert index.find("sdp").value == b"call-id3:bad"


def test_substring_index_matches_keywords_inside_values():
    index = SubstringFieldIndex(NESTED)
    assert index.find("call-id").value == b"bad"


def test_span_index_marker_text_excludes_values():
    index = SpanFieldIndex(b"C1 result ok sdp6:a=pong")
    assert b"pong" not in index.text
    assert b"result ok" in index.text


def test_span_index_marker_text_excludes_cookie():
    index = SpanFieldIndex(b"command_cookie result ok")
    assert b"command" not in index.text


def test_span_index_skips_cookie_fields():
    index = SpanFieldIndex(b"sdp3:abc command")
    assert "sdp" not in index
    assert index.find("sdp") is None


def test_span_index_keeps_first_occurrence():
    index = SpanFieldIndex(b"C sdp1:a sdp1:b")
    assert index.find("sdp").value == b"a"


def test_span_index_malformed_occurrence_raises_on_lookup():
    index = SpanFieldIndex(b"C x sdp y sdp3:abc")
    assert "sdp" in index
    with pytest.raises(InvalidLengthError):
        index.find("sdp")


def test_span_index_truncated_occurrence_does_not_hide_later_fields():
    index = SpanFieldIndex(b"C command offer from-tag99:abc call-id1:c")
    assert index.find("call-id").value == b"c"
    with pytest.raises(TruncatedValueError):
        index.find("from-tag")


def test_span_index_fields_in_payload_order():
    index = SpanFieldIndex(b"C command offer from-tag1:f call-id1:c sdp1:s")
    assert list(index.fields) == ["from-tag", "call-id", "sdp"]


def test_span_index_list_qualifier():
    index = SpanFieldIndex(b"C command delete received-froml3:IP69:2001:db8:e call-id1:c")
    field = index.find("received-from")
    assert field.qualifier == b"IP6"
    assert field.value == b"2001:db8:"
    assert index.find("call-id").value == b"c"
