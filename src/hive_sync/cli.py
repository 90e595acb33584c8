"""
Command line runner for the sync suite against already-running clients.

Hive normally launches the clients and drives the scenarios. This runner is
for the other case: clients were started by hand or by docker compose, the
source with `chain.rlp` imported and the sinks with `genesis.json`.

Examples:
    # Whole suite: verify the source, then sync two sinks from it
    hive-sync run --source geth=http://10.0.0.2:8545 \\
        --sink nethermind=http://10.0.0.3:8545 --sink besu=http://10.0.0.4:8545 --add-peer

    # Only check that a node imported the fixture chain
    hive-sync source http://10.0.0.2:8545

    # Check that the fixture files agree with each other
    hive-sync check-fixtures --fixtures ./chain
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import click

from hive_sync.config import SimulatorConfig
from hive_sync.fixtures import FixtureAccessor
from hive_sync.node import NodeHandle
from hive_sync.rpc import JwtSecret
from hive_sync.scenarios import (
    BOOTNODE_PARAMETER,
    ScenarioResult,
    SuiteReport,
    Verdict,
    run_source_test,
    run_suite,
    run_sync_test,
    source_test_name,
)
from hive_sync.types import RPCError

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RESET = "\x1b[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\x1b[38;5;244m",
    logging.INFO: "\x1b[38;5;40m",
    logging.WARNING: "\x1b[38;5;220m",
    logging.ERROR: "\x1b[38;5;196m",
    logging.CRITICAL: "\x1b[38;5;196;1m",
}
_NAME_COLOR = "\x1b[38;5;39m"


class ColoredFormatter(logging.Formatter):
    """`LOG_FORMAT` with the level and logger name colored for terminals."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        line = super().formatMessage(record)
        return line.replace(
            f"{record.levelname:<8} {record.name}:",
            f"{color}{record.levelname:<8}{_RESET} {_NAME_COLOR}{record.name}{_RESET}:",
            1,
        )


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure root logging for a CLI run."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT) if no_color else ColoredFormatter()
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    # httpx logs every request at INFO; the suite already logs what matters.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def parse_node(value: str, config: SimulatorConfig) -> NodeHandle:
    """
    Parse `[NAME=]URL` into a node handle.

    Raises:
        click.BadParameter: If the URL has no host.
    """
    name, sep, url = value.partition("=")
    if not sep:
        name, url = "", value
    try:
        node = NodeHandle.from_url(url, client=name or None)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    return dataclasses.replace(node, head_timeout=config.head_timeout)


def _common_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command."""
    options = [
        click.option(
            "--fixtures",
            "fixture_dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Fixture directory (default: $HIVE_SYNC_FIXTURES or ./chain)",
        ),
        click.option(
            "--timeout",
            type=click.FloatRange(min=0, min_open=True),
            default=None,
            help="Seconds a sink gets to sync (default: 60)",
        ),
        click.option(
            "--jwt-secret",
            default=None,
            help="Engine API secret as 32-byte hex (default: the Hive secret)",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Enable debug logging"),
        click.option("--no-color", is_flag=True, help="Disable colored logging output"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _build_config(
    fixture_dir: Path | None,
    timeout: float | None,
    jwt_secret: str | None,
    verbose: bool,
    no_color: bool,
) -> SimulatorConfig:
    setup_logging(verbose, no_color)
    try:
        config = SimulatorConfig.from_env()
        overrides: dict[str, Any] = {}
        if fixture_dir is not None:
            overrides["fixture_dir"] = fixture_dir
        if timeout is not None:
            overrides["sync_timeout"] = timeout
        if jwt_secret is not None:
            overrides["jwt_secret"] = JwtSecret(jwt_secret)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    return dataclasses.replace(config, **overrides)


def _report(results: Sequence[ScenarioResult]) -> None:
    for result in results:
        status = "PASS" if result.verdict.passed else "FAIL"
        click.echo(f"{status}  {result.name}: {result.verdict}")


def _exit_with(ctx: click.Context, passed: bool) -> None:
    ctx.exit(0 if passed else 1)


@click.group()
def cli() -> None:
    """Execution client sync conformance suite."""


@cli.command()
@click.option("--source", "source_arg", required=True, help="Source node as [NAME=]RPC_URL")
@click.option(
    "--sink",
    "sink_args",
    multiple=True,
    required=True,
    help="Sink node as [NAME=]RPC_URL (repeatable)",
)
@click.option(
    "--add-peer",
    is_flag=True,
    help="Call admin_addPeer on each sink, for sinks started without the bootnode",
)
@_common_options
@click.pass_context
def run(
    ctx: click.Context,
    source_arg: str,
    sink_args: tuple[str, ...],
    add_peer: bool,
    **options: Any,
) -> None:
    """Verify the source, then sync every sink from it."""
    config = _build_config(**options)
    source = parse_node(source_arg, config)
    sinks = [parse_node(arg, config) for arg in sink_args]

    async def launch_sinks(params: Mapping[str, str]) -> Sequence[NodeHandle]:
        # The sinks are already running; only steer them at the source.
        enode = params[BOOTNODE_PARAMETER]
        logger.info(f"Sink parameters: {dict(params)}")
        if add_peer:
            for sink in sinks:
                try:
                    accepted = await sink.add_peer(enode)
                except RPCError as exc:
                    logger.warning(f"{sink.client}: admin_addPeer failed: {exc.message}")
                    continue
                logger.info(f"{sink.client}: admin_addPeer -> {accepted}")
        return sinks

    fixtures = FixtureAccessor(config.fixture_dir)
    report: SuiteReport = asyncio.run(run_suite(source, launch_sinks, fixtures, config))
    _report(report.results)
    _exit_with(ctx, report.passed)


@cli.command()
@click.argument("node_url")
@_common_options
@click.pass_context
def source(ctx: click.Context, node_url: str, **options: Any) -> None:
    """Check that NODE_URL ([NAME=]RPC_URL) imported the fixture chain."""
    config = _build_config(**options)
    node = parse_node(node_url, config)
    verdict: Verdict = asyncio.run(run_source_test(node, FixtureAccessor(config.fixture_dir)))
    _report([ScenarioResult(name=source_test_name(node), verdict=verdict)])
    _exit_with(ctx, verdict.passed)


@cli.command()
@click.argument("node_url")
@_common_options
@click.pass_context
def sync(ctx: click.Context, node_url: str, **options: Any) -> None:
    """Trigger sync on NODE_URL ([NAME=]RPC_URL) and wait for the fixture head."""
    config = _build_config(**options)
    node = parse_node(node_url, config)
    fixtures = FixtureAccessor(config.fixture_dir)
    verdict: Verdict = asyncio.run(run_sync_test(node, fixtures, config))
    _report([ScenarioResult(name=f"sync -> {node.client}", verdict=verdict)])
    _exit_with(ctx, verdict.passed)


@cli.command("check-fixtures")
@_common_options
@click.pass_context
def check_fixtures(ctx: click.Context, **options: Any) -> None:
    """Check that the fixture files agree with each other."""
    config = _build_config(**options)
    fixtures = FixtureAccessor(config.fixture_dir)
    problems = fixtures.check_consistency()
    for problem in problems:
        click.echo(f"FAIL  {problem}")
    if not problems:
        expected = fixtures.expected_header()
        click.echo(
            f"OK    {len(fixtures.chain())} blocks, head {expected.block_hash().to_0x()} "
            f"at {expected.number}"
        )
    _exit_with(ctx, not problems)


def main() -> None:
    """Console script entry point."""
    cli()
