"""
Execution block header.

The header is read from two places that must agree:

- `headblock.json`, the expected head written by the chain generator, and
- `eth_getBlockByNumber` responses from the nodes under test.

Both use geth's JSON field names. The block hash is never trusted from the
JSON; it is recomputed as `keccak256(rlp(fields))` so that a client reporting
a hash that does not match its own header fields is caught as well.

Fork fields
-----------
Each fork appended fields to the end of the header:

- London: `baseFeePerGas`
- Shanghai: `withdrawalsRoot`
- Cancun: `blobGasUsed`, `excessBlobGas`, `parentBeaconBlockRoot`
- Prague: `requestsHash`

A header carries a prefix of this list: a later fork field cannot be present
while an earlier one is missing.
"""

from __future__ import annotations

from typing import Final

from pydantic import Field, model_validator

from hive_sync.types import Address, Bloom, Bytes8, Hash32, HexBytes, Quantity, RpcModel
from hive_sync.types.hashing import keccak256
from hive_sync.types.rlp import RLPItem, decode_uint, encode_rlp, encode_uint

BASE_FIELDS: Final[tuple[str, ...]] = (
    "parent_hash",
    "sha3_uncles",
    "miner",
    "state_root",
    "transactions_root",
    "receipts_root",
    "logs_bloom",
    "difficulty",
    "number",
    "gas_limit",
    "gas_used",
    "timestamp",
    "extra_data",
    "mix_hash",
    "nonce",
)
"""Pre-London header fields, in RLP order."""

FORK_FIELDS: Final[tuple[str, ...]] = (
    "base_fee_per_gas",
    "withdrawals_root",
    "blob_gas_used",
    "excess_blob_gas",
    "parent_beacon_block_root",
    "requests_hash",
)
"""Optional fields added by later forks, in RLP order."""

_INTEGER_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "difficulty",
        "number",
        "gas_limit",
        "gas_used",
        "timestamp",
        "base_fee_per_gas",
        "blob_gas_used",
        "excess_blob_gas",
    }
)


class Header(RpcModel):
    """An execution-layer block header."""

    parent_hash: Hash32
    sha3_uncles: Hash32
    miner: Address
    state_root: Hash32
    transactions_root: Hash32
    receipts_root: Hash32
    logs_bloom: Bloom
    difficulty: Quantity
    number: Quantity
    gas_limit: Quantity
    gas_used: Quantity
    timestamp: Quantity
    extra_data: HexBytes
    mix_hash: Hash32
    nonce: Bytes8

    base_fee_per_gas: Quantity | None = None
    withdrawals_root: Hash32 | None = None
    blob_gas_used: Quantity | None = None
    excess_blob_gas: Quantity | None = None
    parent_beacon_block_root: Hash32 | None = None
    requests_hash: Hash32 | None = None

    reported_hash: Hash32 | None = Field(default=None, alias="hash")
    """
    The `hash` key from the JSON, if any.

    Kept for diagnostics only. Comparisons use `block_hash()`.
    """

    @model_validator(mode="after")
    def check_fork_fields_contiguous(self) -> Header:
        """Reject headers where a fork field is set but an earlier one is not."""
        missing: str | None = None
        for name in FORK_FIELDS:
            if getattr(self, name) is None:
                missing = missing or name
            elif missing is not None:
                raise ValueError(f"header has {name} but is missing {missing}")
        return self

    def rlp_fields(self) -> list[RLPItem]:
        """Return the header as the RLP list that is hashed."""
        fields: list[RLPItem] = []
        for name in BASE_FIELDS + FORK_FIELDS:
            value = getattr(self, name)
            if value is None:
                # Fork fields form a prefix, so the first gap ends the header.
                break
            fields.append(encode_uint(value) if name in _INTEGER_FIELDS else bytes(value))
        return fields

    def block_hash(self) -> Hash32:
        """Compute the block hash from the header fields."""
        return keccak256(encode_rlp(self.rlp_fields()))

    @classmethod
    def from_rlp(cls, item: RLPItem) -> Header:
        """
        Build a header from its decoded RLP list.

        Raises:
            ValueError: If the list has the wrong shape or field sizes.
        """
        names = BASE_FIELDS + FORK_FIELDS
        if not isinstance(item, list) or not len(BASE_FIELDS) <= len(item) <= len(names):
            raise ValueError("RLP item is not a block header")

        values: dict[str, object] = {}
        for name, raw in zip(names, item, strict=False):
            if not isinstance(raw, bytes):
                raise ValueError(f"header field {name} is a list")
            values[name] = decode_uint(raw) if name in _INTEGER_FIELDS else raw
        return cls.model_validate(values)

    def describe(self) -> str:
        """Short `number (hash)` form for messages."""
        return f"{self.number} ({self.block_hash().short()})"
