"""
Recursive Length Prefix (RLP)
=============================

Block headers are hashed as `keccak256(rlp(fields))`, and `chain.rlp` is a
bare concatenation of RLP-encoded blocks. Both need this codec.

Every item starts with a header byte that says what follows:

    0x00..0x7f   the byte itself, nothing follows
    0x80..0xb7   string, payload length is header - 0x80
    0xb8..0xbf   string, next (header - 0xb7) bytes hold the payload length
    0xc0..0xf7   list, payload length is header - 0xc0
    0xf8..0xff   list, next (header - 0xf7) bytes hold the payload length

The long forms are only legal for payloads above 55 bytes. Integers are
big-endian with no leading zeros; zero is the empty string.

See the Yellow Paper, Appendix B.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import NamedTuple, TypeAlias

RLPItem: TypeAlias = bytes | list["RLPItem"]
"""A byte string or an arbitrarily nested list of them."""

SHORT_STRING_PREFIX = 0x80
LONG_STRING_BASE = 0xB7
SHORT_LIST_PREFIX = 0xC0
LONG_LIST_BASE = 0xF7

MAX_SHORT_PAYLOAD = 55
"""Largest payload that fits the one-byte header forms."""


class RLPDecodingError(Exception):
    """Malformed, truncated, or non-canonical RLP input."""


def encode_uint(value: int) -> bytes:
    """
    Minimal big-endian form of a non-negative integer.

    Raises:
        ValueError: For negative values.
    """
    if value < 0:
        raise ValueError(f"Cannot RLP encode negative integer {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def decode_uint(data: bytes) -> int:
    """
    Read an integer field.

    Raises:
        RLPDecodingError: If the field has a leading zero byte.
    """
    if data.startswith(b"\x00"):
        raise RLPDecodingError("Non-canonical: integer with leading zero bytes")
    return int.from_bytes(data, "big")


def _header(length: int, short_base: int, long_base: int) -> bytes:
    if length <= MAX_SHORT_PAYLOAD:
        return bytes([short_base + length])
    length_bytes = encode_uint(length)
    return bytes([long_base + len(length_bytes)]) + length_bytes


def encode_rlp(item: RLPItem) -> bytes:
    """
    Serialize `item`.

    Raises:
        TypeError: For anything other than bytes or lists.
    """
    if isinstance(item, list):
        payload = b"".join(map(encode_rlp, item))
        return _header(len(payload), SHORT_LIST_PREFIX, LONG_LIST_BASE) + payload
    if not isinstance(item, bytes):
        raise TypeError(f"Cannot RLP encode type: {type(item).__name__}")
    if len(item) == 1 and item[0] < SHORT_STRING_PREFIX:
        return item
    return _header(len(item), SHORT_STRING_PREFIX, LONG_STRING_BASE) + item


class _Span(NamedTuple):
    """Location of one item's payload inside a buffer."""

    is_list: bool
    start: int
    end: int


def _read_span(data: bytes, offset: int) -> _Span:
    if offset >= len(data):
        raise RLPDecodingError("Unexpected end of data")

    first = data[offset]
    if first < SHORT_STRING_PREFIX:
        return _Span(False, offset, offset + 1)

    is_list = first >= SHORT_LIST_PREFIX
    short_base, long_base = (
        (SHORT_LIST_PREFIX, LONG_LIST_BASE) if is_list else (SHORT_STRING_PREFIX, LONG_STRING_BASE)
    )

    if first <= long_base:
        start = offset + 1
        span = _Span(is_list, start, start + first - short_base)
        _require(data, span.end)
        if not is_list and span.end - start == 1 and data[start] < SHORT_STRING_PREFIX:
            raise RLPDecodingError("Non-canonical: single byte encoded as string")
        return span

    size_of_length = first - long_base
    start = offset + 1 + size_of_length
    _require(data, start)
    if data[offset + 1] == 0:
        raise RLPDecodingError("Non-canonical: leading zeros in length encoding")
    length = int.from_bytes(data[offset + 1 : start], "big")
    if length <= MAX_SHORT_PAYLOAD:
        kind = "list" if is_list else "string"
        raise RLPDecodingError(f"Non-canonical: long {kind} encoding for short {kind}")
    _require(data, start + length)
    return _Span(is_list, start, start + length)


def _require(data: bytes, end: int) -> None:
    if end > len(data):
        raise RLPDecodingError(f"Data too short: need {end}, have {len(data)}")


def _decode_at(data: bytes, offset: int) -> tuple[RLPItem, int]:
    span = _read_span(data, offset)
    if not span.is_list:
        return data[span.start : span.end], span.end

    children: list[RLPItem] = []
    cursor = span.start
    while cursor < span.end:
        child, cursor = _decode_at(data, cursor)
        children.append(child)
    if cursor != span.end:
        raise RLPDecodingError("List payload length mismatch")
    return children, span.end


def decode_rlp(data: bytes) -> RLPItem:
    """
    Decode exactly one item occupying all of `data`.

    Raises:
        RLPDecodingError: On malformed input or trailing bytes.
    """
    if not data:
        raise RLPDecodingError("Empty RLP data")
    item, end = _decode_at(data, 0)
    if end != len(data):
        raise RLPDecodingError(f"Trailing data: decoded {end} of {len(data)} bytes")
    return item


def decode_rlp_stream(data: bytes) -> Iterator[RLPItem]:
    """Yield the items of a concatenated RLP stream, such as an exported chain."""
    offset = 0
    while offset < len(data):
        item, offset = _decode_at(data, offset)
        yield item
