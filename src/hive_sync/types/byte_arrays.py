"""
Byte strings as execution clients write them in JSON: `0x`-prefixed hex.

`HexBytes` covers variable-length data such as `extraData`. `BaseBytes`
subclasses pin an exact length (hashes, addresses, the bloom, the nonce).
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


def _to_raw(value: bytes | bytearray | str) -> bytes:
    """Raw bytes from bytes or a hex string (the `0x` prefix is optional)."""
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    return bytes(value)


class HexBytes(bytes):
    """Variable-length bytes that travel through JSON as `0x` hex."""

    def __new__(cls, value: bytes | bytearray | str = b"") -> Self:
        return super().__new__(cls, _to_raw(value))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept instances, bytes, or hex strings; dump as `0x` hex."""
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(cls._validate),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(cls.to_0x),
        )

    @classmethod
    def _validate(cls, value: Any) -> Self:
        # bytes(5) would quietly produce five zero bytes.
        if not isinstance(value, (str, bytes, bytearray)):
            raise ValueError(f"{cls.__name__} expects a hex string, got {type(value).__name__}")
        return cls(value)

    def to_0x(self) -> str:
        return "0x" + self.hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_0x()})"

    def __hash__(self) -> int:
        return hash((type(self), bytes(self)))


class BaseBytes(HexBytes):
    """
    Bytes of one exact length, fixed per subclass by `LENGTH`.

    Raises:
        ValueError: On construction with any other length.
    """

    LENGTH: ClassVar[int]

    def __new__(cls, value: bytes | bytearray | str = b"") -> Self:
        raw = _to_raw(value)
        if len(raw) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(raw)}")
        return bytes.__new__(cls, raw)

    @classmethod
    def zero(cls) -> Self:
        return cls(bytes(cls.LENGTH))

    def short(self) -> str:
        """Abbreviation used in logs, the way clients print hashes: `d4e567..cb8fa3`."""
        digits = self.hex()
        return f"{digits[:6]}..{digits[-6:]}"


class Hash32(BaseBytes):
    """Keccak-256 output: block hashes, state and trie roots."""

    LENGTH = 32


class Address(BaseBytes):
    LENGTH = 20


class Bloom(BaseBytes):
    """Logs bloom filter."""

    LENGTH = 256


class Bytes8(BaseBytes):
    """The proof-of-work nonce."""

    LENGTH = 8


ZERO_HASH = Hash32.zero()
