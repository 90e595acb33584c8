"""Shared fixtures for hive_sync tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from hive_sync.config import SimulatorConfig
from hive_sync.fixtures import FixtureAccessor, Header
from tests.hive_sync.helpers import FakeNode, make_chain, write_fixtures


@pytest.fixture
def chain() -> list[Header]:
    """A short linked chain; the last header is the expected head."""
    return make_chain(6)


@pytest.fixture
def expected(chain: list[Header]) -> Header:
    return chain[-1]


@pytest.fixture
def fixture_dir(tmp_path: Path, chain: list[Header]) -> Path:
    """A consistent fixture directory for `chain`."""
    return write_fixtures(tmp_path / "chain", chain)


@pytest.fixture
def fixtures(fixture_dir: Path) -> FixtureAccessor:
    return FixtureAccessor(fixture_dir)


@pytest.fixture
def config(fixture_dir: Path) -> SimulatorConfig:
    """Configuration with timings small enough for real sleeps in tests."""
    return SimulatorConfig(
        fixture_dir=fixture_dir,
        sync_timeout=2.0,
        poll_interval=0.01,
        head_timeout=1.0,
        peer_attempts=1,
    )


@pytest.fixture
def source(chain: list[Header]) -> FakeNode:
    """A source that imported the whole chain."""
    return FakeNode(client="go-ethereum", host="10.0.0.2", heads=[chain[-1]])


@pytest.fixture
def sink(chain: list[Header]) -> FakeNode:
    """A sink sitting at genesis that syncs the chain once triggered."""
    return FakeNode(
        client="nethermind",
        host="10.0.0.3",
        heads=[chain[0]],
        heads_after_trigger=list(chain),
    )
