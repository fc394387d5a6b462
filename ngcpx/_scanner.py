"""
Netstring field scanning for NGCP control payloads.

A field is a keyword immediately followed by ``<length>:<value>`` where
``length`` decimal digits declare how many bytes form ``value``. The
keyword section is not nested in any way the scanner could see, so a
keyword that happens to occur inside another field's value looks exactly
like a real key. Two index implementations deal with that differently:

- :class:`SpanFieldIndex` walks the buffer once and jumps over every
  value it consumes, so bytes inside a value are never rematched.
- :class:`SubstringFieldIndex` searches the whole buffer for each
  keyword, which is how the protocol has historically been consumed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from ._types import (
    DecodeError,
    DecoderConfig,
    InvalidLengthError,
    MalformedFieldError,
    NoCookieError,
    TruncatedValueError,
)
from ._utils import COLON, FIELD_KEYWORDS, LIST_END, LIST_START, SPACE


# ============================================================================
# Field Parsing
# ============================================================================


def _parse_string(buffer: bytes, field: str, offset: int) -> tuple[bytes, int]:
    """
    Parse ``<digits>:<value>`` starting at *offset*.

    Returns:
        The value and the offset just past it

    Raises:
        MalformedFieldError: No separator follows the length
        InvalidLengthError: The length is not a run of decimal digits
        TruncatedValueError: The value runs past the end of the buffer
    """
    colon = buffer.find(COLON, offset)
    if colon == -1:
        raise MalformedFieldError(field)

    digits = buffer[offset:colon]
    if not digits or not digits.isdigit():
        raise InvalidLengthError(field, digits)

    start = colon + 1
    significant = digits.lstrip(b"0")
    # Longer than the buffer length itself: cannot fit, and int() may refuse it
    if len(significant) > len(str(len(buffer))):
        raise TruncatedValueError(field, None, len(buffer) - start)

    length = int(significant or b"0")
    end = start + length
    if end > len(buffer):
        raise TruncatedValueError(field, length, len(buffer) - start)
    return buffer[start:end], end


def _parse_list(buffer: bytes, field: str, offset: int) -> tuple[tuple[bytes, ...], int]:
    """Parse ``l<string>...e`` starting at the ``l`` at *offset*."""
    items: list[bytes] = []
    pos = offset + 1
    while True:
        if pos >= len(buffer):
            raise TruncatedValueError(field)
        if buffer.startswith(LIST_END, pos):
            break
        item, pos = _parse_string(buffer, field, pos)
        items.append(item)
    if not items:
        raise MalformedFieldError(field)
    return tuple(items), pos + 1


def parse_field(buffer: bytes, field: str, offset: int) -> tuple[tuple[bytes, ...], int]:
    """
    Parse the value that follows a keyword ending at *offset*.

    The value is either a single netstring or a list of netstrings
    (``l3:IP411:192.0.2.10e``), as used by ``received-from``.

    Returns:
        Tuple of item values and the offset just past the value
    """
    if buffer.startswith(LIST_START, offset):
        return _parse_list(buffer, field, offset)
    value, end = _parse_string(buffer, field, offset)
    return (value,), end


def scan(buffer: bytes, keyword: str, start: int = 0) -> Optional[bytes]:
    """
    Return the value of the first *keyword* occurrence at or after *start*.

    Plain case-sensitive substring search with no notion of nesting.

    Returns:
        The value bytes, or None if the keyword never occurs

    Example:
        >>> scan(b"X command offer from-tag7:abc1234", "from-tag")
        b'abc1234'
    """
    needle = keyword.encode("ascii")
    index = buffer.find(needle, start)
    if index == -1:
        return None
    items, _ = parse_field(buffer, keyword, index + len(needle))
    return items[-1]


def extract_cookie(buffer: bytes) -> bytes:
    """
    Return the token before the first space.

    Raises:
        NoCookieError: The buffer contains no space
    """
    end = buffer.find(SPACE)
    if end == -1:
        raise NoCookieError()
    return buffer[:end]


# ============================================================================
# Field Indexes
# ============================================================================


@dataclass(slots=True)
class Field:
    """A keyword occurrence and its parsed value (or the parse failure)."""

    keyword: str
    offset: int
    items: tuple[bytes, ...] = ()
    error: Optional[DecodeError] = None

    @property
    def value(self) -> bytes:
        """The field value; for list values, the last item."""
        if self.error is not None:
            raise self.error
        return self.items[-1]

    @property
    def qualifier(self) -> Optional[bytes]:
        """The first item of a list value (e.g. the address family)."""
        return self.items[0] if len(self.items) > 1 else None


class FieldIndex(ABC):
    """
    Abstract lookup of keyword fields in one payload.

    Implementations must provide:
    - presence tests for a keyword (malformed occurrences count as present)
    - the first occurrence of a keyword, raising if it is malformed
    - the marker text used for message classification
    """

    def __init__(self, buffer: bytes) -> None:
        self.buffer = buffer

    @abstractmethod
    def __contains__(self, keyword: object) -> bool:
        ...

    @abstractmethod
    def find(self, keyword: str) -> Optional[Field]:
        """
        Return the first occurrence of *keyword*, or None if absent.

        Raises:
            DecodeError: The occurrence is present but does not parse
        """
        ...

    @property
    @abstractmethod
    def text(self) -> bytes:
        """Bytes searched for classification markers."""
        ...


class SubstringFieldIndex(FieldIndex):
    """Whole-buffer substring search for every keyword and marker."""

    def __contains__(self, keyword: object) -> bool:
        return isinstance(keyword, str) and keyword.encode("ascii") in self.buffer

    def find(self, keyword: str) -> Optional[Field]:
        needle = keyword.encode("ascii")
        index = self.buffer.find(needle)
        if index == -1:
            return None
        items, _ = parse_field(self.buffer, keyword, index + len(needle))
        return Field(keyword, index, items)

    @property
    def text(self) -> bytes:
        return self.buffer


class SpanFieldIndex(FieldIndex):
    """
    Single left-to-right pass over the keyword section.

    Every keyword occurrence is parsed where it stands; when its value
    parses, the cursor moves past the value so nothing inside it can be
    taken for a keyword or a marker. Only the first occurrence of each
    keyword is kept, and a malformed occurrence keeps its error until the
    field is looked up. The cookie (everything before the first space)
    is not scanned.
    """

    def __init__(
        self, buffer: bytes, keywords: Iterable[str] = FIELD_KEYWORDS
    ) -> None:
        super().__init__(buffer)
        self._fields: dict[str, Field] = {}
        self._text = b""
        self._tokenize(keywords)

    def _tokenize(self, keywords: Iterable[str]) -> None:
        buffer = self.buffer
        # Longest first so a keyword never shadows a longer one sharing its prefix
        needles = sorted(
            ((keyword, keyword.encode("ascii")) for keyword in keywords),
            key=lambda pair: len(pair[1]),
            reverse=True,
        )

        pos = buffer.find(SPACE) + 1
        segment_start = pos
        segments: list[bytes] = []

        while pos < len(buffer):
            match = next(
                (pair for pair in needles if buffer.startswith(pair[1], pos)), None
            )
            if match is None:
                pos += 1
                continue

            keyword, needle = match
            segments.append(buffer[segment_start:pos])
            value_offset = pos + len(needle)
            try:
                items, end = parse_field(buffer, keyword, value_offset)
            except DecodeError as e:
                field = Field(keyword, pos, error=e)
                end = value_offset
            else:
                field = Field(keyword, pos, items)

            self._fields.setdefault(keyword, field)
            pos = segment_start = end

        segments.append(buffer[segment_start:])
        # Separator keeps markers from forming across a consumed span
        self._text = SPACE.join(segments)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._fields

    def find(self, keyword: str) -> Optional[Field]:
        field = self._fields.get(keyword)
        if field is not None and field.error is not None:
            raise field.error
        return field

    @property
    def text(self) -> bytes:
        return self._text

    @property
    def fields(self) -> dict[str, Field]:
        """First occurrence of every keyword seen, in payload order."""
        return dict(self._fields)


def build_index(buffer: bytes, config: DecoderConfig) -> FieldIndex:
    """Create the field index selected by *config*."""
    if config.isolate_value_spans:
        return SpanFieldIndex(buffer)
    return SubstringFieldIndex(buffer)


__all__ = [
    "Field",
    "FieldIndex",
    "SpanFieldIndex",
    "SubstringFieldIndex",
    "build_index",
    "extract_cookie",
    "parse_field",
    "scan",
]
