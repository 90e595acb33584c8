"""
Hex-encoded unsigned integers ("quantities") as used by Ethereum JSON-RPC.

Quantities are `0x`-prefixed, big-endian hex with no leading zeros:
`0x0`, `0x64`, `0x400000000`. Fixture generators and some clients also emit
plain decimal integers, which are accepted on input.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


def parse_quantity(value: Any) -> int:
    """
    Parse a JSON-RPC quantity into a non-negative integer.

    Raises:
        ValueError: If the value is not a hex string or integer, or is negative.
    """
    if isinstance(value, bool):
        raise ValueError("quantity must not be a boolean")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        if not value.startswith(("0x", "0X")):
            raise ValueError(f"quantity must be 0x-prefixed hex, got {value!r}")
        digits = value[2:]
        if not digits:
            raise ValueError("quantity has no digits")
        result = int(digits, 16)
    else:
        raise ValueError(f"quantity must be a hex string, got {type(value).__name__}")

    if result < 0:
        raise ValueError(f"quantity must be non-negative, got {result}")
    return result


def to_quantity(value: int) -> str:
    """Encode a non-negative integer as a JSON-RPC quantity."""
    return hex(value)


Quantity = Annotated[int, BeforeValidator(parse_quantity), PlainSerializer(to_quantity)]
"""Integer field that reads and writes JSON-RPC hex quantities."""
