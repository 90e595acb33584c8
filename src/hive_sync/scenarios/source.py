"""
Source-verification scenario.

The source client imported `chain.rlp` while starting up, so by the time the
scenario runs its head must already be the fixture head. One query decides;
there is nothing to wait for.
"""

from __future__ import annotations

import logging

from hive_sync.fixtures import FixtureAccessor
from hive_sync.node import NodeHandle
from hive_sync.types import FixtureUnavailable, RPCError

from .verdict import Verdict, VerdictKind

logger = logging.getLogger(__name__)


async def run_source_test(source: NodeHandle, fixtures: FixtureAccessor) -> Verdict:
    """
    Check whether the source has imported its chain correctly.

    A pure query: running it again against an unchanged node gives the
    same verdict.
    """
    try:
        expected = fixtures.expected_header()
    except FixtureUnavailable as exc:
        return Verdict.failure(exc)

    try:
        head = await source.head()
    except RPCError as exc:
        message = f"can't query chain head: {exc.message}"
        logger.info(f"{source.client}: {message}")
        return Verdict(kind=VerdictKind.RPC_FAILED, message=message)

    if head.block_hash() != expected.block_hash():
        message = f"wrong chain head {head.describe()}, want {expected.describe()}"
        logger.info(f"{source.client}: {message}")
        return Verdict(kind=VerdictKind.HEAD_MISMATCH, message=message)

    logger.info(f"{source.client}: chain head is {head.describe()}")
    return Verdict.success(f"head {head.describe()}")
