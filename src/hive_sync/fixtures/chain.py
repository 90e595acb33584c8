"""Reading exported chains (`chain.rlp`)."""

from __future__ import annotations

from dataclasses import dataclass

from hive_sync.types.rlp import RLPDecodingError, decode_rlp_stream

from .header import Header


@dataclass(frozen=True, slots=True)
class ChainBlock:
    """One block of an exported chain, reduced to what the harness inspects."""

    header: Header
    """The decoded block header."""

    transaction_count: int
    """Number of transactions in the body."""

    uncle_count: int
    """Number of ommer headers in the body."""

    withdrawal_count: int | None
    """Number of withdrawals, or None for pre-Shanghai blocks."""


def decode_chain(data: bytes) -> list[ChainBlock]:
    """
    Decode a concatenation of RLP blocks.

    Each block is `[header, transactions, uncles]` with an optional
    trailing withdrawals list.

    Raises:
        RLPDecodingError: If the stream is malformed.
        ValueError: If an item is not shaped like a block.
    """
    blocks: list[ChainBlock] = []
    for index, item in enumerate(decode_rlp_stream(data)):
        if not isinstance(item, list) or len(item) not in (3, 4):
            raise ValueError(f"block {index} is not a [header, txs, uncles, ...] list")

        header_item, txs, uncles = item[0], item[1], item[2]
        if not isinstance(txs, list) or not isinstance(uncles, list):
            raise ValueError(f"block {index} has a malformed body")

        withdrawal_count: int | None = None
        if len(item) == 4:
            withdrawals = item[3]
            if not isinstance(withdrawals, list):
                raise ValueError(f"block {index} has malformed withdrawals")
            withdrawal_count = len(withdrawals)

        try:
            header = Header.from_rlp(header_item)
        except RLPDecodingError as exc:
            raise ValueError(f"block {index} header: {exc}") from exc

        blocks.append(
            ChainBlock(
                header=header,
                transaction_count=len(txs),
                uncle_count=len(uncles),
                withdrawal_count=withdrawal_count,
            )
        )
    return blocks
