"""
The sync suite.

For each client, the suite tests whether it can serve as a sync source for
all other clients, including itself:

1. "CLIENT as sync source": the source imports `chain.rlp` at startup and
   must report the fixture head.
2. "sync SOURCE -> CLIENT": every candidate, started with the source as
   bootnode, is triggered through the Engine API and must reach the same
   head.

Launching clients is the orchestrator's business. The suite only asks for
candidates through `launch_sinks`, passing the parameters they must be
started with.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Final

from hive_sync.config import SimulatorConfig
from hive_sync.fixtures import CHAIN, GENESIS, FixtureAccessor
from hive_sync.node import NodeHandle, wait_for_peer_endpoint
from hive_sync.types import EndpointUnavailable, FixtureUnavailable, StrictBaseModel

from .sink import run_sync_test, sink_parameters
from .source import run_source_test
from .verdict import Verdict, VerdictKind

logger = logging.getLogger(__name__)

SUITE_NAME: Final = "sync"

SUITE_DESCRIPTION: Final = (
    "This suite of tests verifies that clients can sync from each other in different modes.\n"
    "For each client, we test if it can serve as a sync source for all other clients "
    "(including itself)."
)

SOURCE_FILES: Final[Mapping[str, str]] = {
    "genesis.json": GENESIS,
    "chain.rlp": CHAIN,
}
"""Files a source client is started with, mapped to their fixture names."""

SINK_FILES: Final[Mapping[str, str]] = {
    "genesis.json": GENESIS,
}
"""Files a sink client is started with. Sinks get the chain over the network."""

SinkLauncher = Callable[[Mapping[str, str]], Awaitable[Sequence[NodeHandle]]]
"""Starts the candidate clients with the given parameters and returns their handles."""


def source_test_name(source: NodeHandle) -> str:
    return f"{source.client} as sync source"


def sync_test_name(source: NodeHandle, sink: NodeHandle) -> str:
    return f"sync {source.client} -> {sink.client}"


class ScenarioResult(StrictBaseModel):
    """A named verdict."""

    name: str
    verdict: Verdict


class SuiteReport(StrictBaseModel):
    """All results of one suite run, source test first."""

    results: tuple[ScenarioResult, ...]

    @property
    def passed(self) -> bool:
        return all(result.verdict.passed for result in self.results)

    @property
    def failures(self) -> tuple[ScenarioResult, ...]:
        return tuple(result for result in self.results if not result.verdict.passed)


async def _run_named_sync_test(
    source: NodeHandle,
    sink: NodeHandle,
    fixtures: FixtureAccessor,
    config: SimulatorConfig,
) -> ScenarioResult:
    name = sync_test_name(source, sink)
    logger.info(f"Running {name}")
    try:
        verdict = await run_sync_test(sink, fixtures, config)
    except Exception as exc:
        # A crash in one sink must not discard the other verdicts.
        logger.exception(f"{name}: unexpected error")
        verdict = Verdict.crashed(exc)
    logger.info(f"{name}: {verdict}")
    return ScenarioResult(name=name, verdict=verdict)


async def run_sync_tests(
    source: NodeHandle,
    sinks: Sequence[NodeHandle],
    fixtures: FixtureAccessor,
    config: SimulatorConfig,
) -> list[ScenarioResult]:
    """
    Run the sync scenario for every sink concurrently.

    Scenarios share no mutable state, and each one turns its own failures
    into a verdict, so one sink failing never affects another.
    """
    return list(
        await asyncio.gather(
            *(_run_named_sync_test(source, sink, fixtures, config) for sink in sinks)
        )
    )


async def run_suite(
    source: NodeHandle,
    launch_sinks: SinkLauncher,
    fixtures: FixtureAccessor,
    config: SimulatorConfig,
) -> SuiteReport:
    """
    Verify `source`, then sync every candidate from it.

    Sinks are only launched once the source passed and its enode is known.
    """
    name = source_test_name(source)
    logger.info(f"Running {name}")
    verdict = await run_source_test(source, fixtures)
    logger.info(f"{name}: {verdict}")
    results = [ScenarioResult(name=name, verdict=verdict)]
    if not verdict.passed:
        return SuiteReport(results=tuple(results))

    try:
        enode = await wait_for_peer_endpoint(source, attempts=config.peer_attempts)
    except EndpointUnavailable as exc:
        logger.info(f"{source.client}: can't get node peer-to-peer endpoint: {exc.message}")
        results[0] = ScenarioResult(
            name=name,
            verdict=Verdict(kind=VerdictKind.ENDPOINT_UNAVAILABLE, message=exc.message),
        )
        return SuiteReport(results=tuple(results))

    try:
        params = sink_parameters(fixtures.fork_environment(), enode)
    except FixtureUnavailable as exc:
        results[0] = ScenarioResult(name=name, verdict=Verdict.failure(exc))
        return SuiteReport(results=tuple(results))

    sinks = await launch_sinks(params)
    results.extend(await run_sync_tests(source, sinks, fixtures, config))
    return SuiteReport(results=tuple(results))
