"""Tests for JSON-RPC quantities."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from hive_sync.types import Quantity, RpcModel, parse_quantity, to_quantity


class _Block(RpcModel):
    number: Quantity


class TestParseQuantity:
    """Tests for parse_quantity."""

    @pytest.mark.parametrize(
        ("raw", "value"),
        [("0x0", 0), ("0x64", 100), ("0X64", 100), ("0x400000000", 0x400000000), (42, 42)],
    )
    def test_accepts_hex_and_int(self, raw: object, value: int) -> None:
        assert parse_quantity(raw) == value

    @pytest.mark.parametrize("raw", ["64", "0x", "0xg1", True, 1.5, None, -1])
    def test_rejects_malformed(self, raw: object) -> None:
        with pytest.raises(ValueError):
            parse_quantity(raw)

    @given(st.integers(min_value=0, max_value=2**256))
    def test_to_quantity_is_parseable(self, value: int) -> None:
        encoded = to_quantity(value)
        assert encoded.startswith("0x")
        assert parse_quantity(encoded) == value


class TestQuantityField:
    """Quantity as a pydantic field."""

    def test_reads_hex(self) -> None:
        assert _Block.model_validate({"number": "0x63"}).number == 99

    def test_writes_hex(self) -> None:
        assert _Block(number=100).model_dump(mode="json") == {"number": "0x64"}

    def test_invalid_value_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            _Block.model_validate({"number": "ninety-nine"})
