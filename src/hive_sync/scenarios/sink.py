"""
Sync scenario: one candidate client syncs from the verified source.

The candidate was started with the source as its bootnode (see
`sink_parameters`). The scenario then points it at the fixture head through
the Engine API and waits for its head to get there.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

from hive_sync.config import SimulatorConfig
from hive_sync.engine import trigger_sync
from hive_sync.fixtures import FixtureAccessor
from hive_sync.node import NodeHandle
from hive_sync.sync import wait_for_sync
from hive_sync.types import EnginePayloadRejected, FixtureUnavailable

from .verdict import Verdict

logger = logging.getLogger(__name__)

BOOTNODE_PARAMETER: Final = "HIVE_BOOTNODE"
"""Client parameter carrying the enode the client should dial first."""


def sink_parameters(fork_env: Mapping[str, str], enode: str) -> dict[str, str]:
    """Client parameters for a sink: the fork environment plus the source as bootnode."""
    params = dict(fork_env)
    params[BOOTNODE_PARAMETER] = enode
    return params


async def run_sync_test(
    node: NodeHandle,
    fixtures: FixtureAccessor,
    config: SimulatorConfig,
) -> Verdict:
    """
    Trigger sync on `node`, then wait until it reaches the expected head.

    The trigger runs to completion before the wait loop starts. If it
    fails, the wait loop is never entered.
    """
    try:
        expected = fixtures.expected_header()
        new_payload = fixtures.new_payload_call()
        forkchoice = fixtures.forkchoice_call()
    except FixtureUnavailable as exc:
        return Verdict.failure(exc)

    try:
        await trigger_sync(node, new_payload, forkchoice, config.jwt_secret)
    except EnginePayloadRejected as exc:
        logger.info(f"{node.client}: sync trigger failed: {exc.message}")
        return Verdict.failure(exc)

    result = await wait_for_sync(
        node,
        expected,
        timeout=config.sync_timeout,
        poll_interval=config.poll_interval,
    )

    error = result.to_error()
    if error is not None:
        logger.info(f"{node.client}: sync failed: {error.message}")
        return Verdict.failure(error)
    return Verdict.success(f"synced to {expected.describe()} after {result.elapsed:.1f}s")
