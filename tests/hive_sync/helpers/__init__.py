"""Test helpers for hive_sync unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    EMPTY_ROOT_HASH,
    EMPTY_UNCLE_HASH,
    encode_chain,
    header_json,
    make_chain,
    make_forkchoice_call,
    make_header,
    make_new_payload_call,
    write_fixtures,
)
from .fake_node import DEFAULT_ENODE, FakeNode, RecordedCall, RpcFailure, heads_climbing_to

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


class FakeClock:
    """Manually advanced monotonic clock, paired with a sleep that advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


__all__ = [
    # Builders
    "EMPTY_ROOT_HASH",
    "EMPTY_UNCLE_HASH",
    "encode_chain",
    "header_json",
    "make_chain",
    "make_forkchoice_call",
    "make_header",
    "make_new_payload_call",
    "write_fixtures",
    # Fakes
    "DEFAULT_ENODE",
    "FakeClock",
    "FakeNode",
    "RecordedCall",
    "RpcFailure",
    "heads_climbing_to",
    # Async utilities
    "run_async",
]
