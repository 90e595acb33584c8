"""
Sync Wait Loop
==============

Blocks until a node's head converges to the expected block, or a deadline
passes.

Clients expose no head-change notification over plain JSON-RPC, so this is
a polling loop: query the head, compare, sleep, repeat. The deadline is fixed
at entry and is not extended when the node makes progress.

Height Before Hash
------------------
Hashes are only compared once the reported height equals the expected
height. At any other height the hashes differ by definition, which says
nothing about whether the node is on the right chain. At the expected height
a different hash is a fork and ends the run at once.

A node that overshoots the expected height keeps being polled: a client may
briefly import past the target and reorg back. If it never sits at the
expected height before the deadline, the run times out.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from hive_sync.fixtures import Header
from hive_sync.types import HarnessError, HashMismatch, RPCError, SyncTimeout

from .config import POLL_INTERVAL, SYNC_TIMEOUT
from .states import SyncState

logger = logging.getLogger(__name__)


class HeadSource(Protocol):
    """Anything that can report a canonical head, usually a `NodeHandle`."""

    client: str

    async def head(self) -> Header:
        """Return the current head header, raising `RPCError` on failure."""
        ...


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Terminal outcome of one wait loop run."""

    state: SyncState
    """Terminal state the loop ended in."""

    last_number: int
    """Last head number observed (0 if none was)."""

    elapsed: float
    """Seconds spent in the loop."""

    polls: int
    """Number of head queries issued."""

    head: Header | None = None
    """Last header observed, if any."""

    error: RPCError | None = None
    """The failure that ended an ERRORED run."""

    expected: Header | None = None
    """The header the loop waited for."""

    @property
    def succeeded(self) -> bool:
        return self.state is SyncState.SUCCEEDED

    def to_error(self) -> HarnessError | None:
        """
        Describe a failed run as an exception.

        Returns:
            None for SUCCEEDED, otherwise the matching error: `HashMismatch`,
            `SyncTimeout`, or the `RPCError` that ended the loop.
        """
        match self.state:
            case SyncState.SUCCEEDED:
                return None
            case SyncState.MISMATCHED:
                assert self.head is not None and self.expected is not None
                return HashMismatch(
                    self.last_number,
                    got=self.head.block_hash().to_0x(),
                    want=self.expected.block_hash().to_0x(),
                )
            case SyncState.TIMED_OUT:
                return SyncTimeout(self.elapsed, self.last_number)
            case SyncState.ERRORED:
                assert self.error is not None
                return self.error
            case _:
                raise ValueError(f"{self.state} is not a terminal state")

    def raise_for_outcome(self) -> None:
        """Raise the error of a failed run; do nothing on success."""
        error = self.to_error()
        if error is not None:
            raise error


async def wait_for_sync(
    node: HeadSource,
    expected: Header,
    *,
    timeout: float = SYNC_TIMEOUT,
    poll_interval: float = POLL_INTERVAL,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> SyncResult:
    """
    Poll `node` until its head is `expected`, a fork, or the deadline passes.

    Args:
        node: The node to watch.
        expected: Header the node must converge on.
        timeout: Seconds from entry until the run times out.
        poll_interval: Seconds to sleep between queries.
        clock: Monotonic time source (injectable for testing).
        sleep: Async sleep function (injectable for testing).

    Returns:
        The terminal result. Query failures are reported as ERRORED, not raised.
    """
    want_number = expected.number
    want_hash = expected.block_hash()

    start = clock()
    deadline = start + timeout

    state = SyncState.POLLING
    current = 0
    polls = 0
    head: Header | None = None

    def finish(final: SyncState, error: RPCError | None = None) -> SyncResult:
        assert state.can_transition_to(final)
        return SyncResult(
            state=final,
            last_number=current,
            elapsed=clock() - start,
            polls=polls,
            head=head,
            error=error,
            expected=expected,
        )

    while True:
        now = clock()
        if now >= deadline:
            logger.info(f"{node.client}: timeout, head stuck at {current}, want {want_number}")
            return finish(SyncState.TIMED_OUT)

        polls += 1
        try:
            head = await node.head()
        except RPCError as exc:
            logger.info(f"{node.client}: error getting head block: {exc.message}")
            return finish(SyncState.ERRORED, exc)

        number = head.number
        if number != current:
            logger.info(f"{node.client} has new head {number}")
            current = number

        if number == want_number:
            if head.block_hash() == want_hash:
                logger.info(f"{node.client}: synced to {expected.describe()}")
                return finish(SyncState.SUCCEEDED)
            logger.info(f"{node.client}: wrong head {head.describe()}, want {expected.describe()}")
            return finish(SyncState.MISMATCHED)

        # Never sleep past the deadline.
        await sleep(max(0.0, min(poll_interval, deadline - clock())))
