"""
Global configuration for the sync suite.

Every setting has a default that matches a standard Hive run and can be
overridden from the environment:

- HIVE_SYNC_FIXTURES: directory holding the chain fixtures (default `./chain`)
- HIVE_SYNC_JWT_SECRET: hex Engine API secret (32 bytes)
- HIVE_SYNC_TIMEOUT: seconds to wait for a client to sync
- HIVE_SYNC_POLL_INTERVAL: seconds between head queries
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from hive_sync.rpc import DEFAULT_JWT_SECRET, JwtSecret
from hive_sync.sync.config import (
    HEAD_QUERY_TIMEOUT,
    PEER_ENDPOINT_ATTEMPTS,
    POLL_INTERVAL,
    SYNC_TIMEOUT,
)

DEFAULT_FIXTURE_DIR = Path("chain")
"""Fixture directory, relative to the working directory of the simulator."""


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} environment variable: {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class SimulatorConfig:
    """Settings shared by every scenario of one suite run."""

    fixture_dir: Path = DEFAULT_FIXTURE_DIR
    """Directory with genesis.json, chain.rlp, headblock.json, ..."""

    jwt_secret: JwtSecret = field(default=DEFAULT_JWT_SECRET, repr=False)
    """Engine API secret shared with every client."""

    sync_timeout: float = SYNC_TIMEOUT
    """Seconds a sink gets to reach the expected head."""

    poll_interval: float = POLL_INTERVAL
    """Seconds between two head queries."""

    head_timeout: float = HEAD_QUERY_TIMEOUT
    """Timeout of a single head query."""

    peer_attempts: int = PEER_ENDPOINT_ATTEMPTS
    """How often to ask the source for its enode."""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> SimulatorConfig:
        """
        Build a configuration from environment variables.

        Raises:
            ValueError: If a variable is set to a malformed value.
        """
        env = os.environ if env is None else env

        secret = DEFAULT_JWT_SECRET
        raw_secret = env.get("HIVE_SYNC_JWT_SECRET")
        if raw_secret is not None:
            try:
                secret = JwtSecret(raw_secret.strip())
            except ValueError as exc:
                raise ValueError(f"Invalid HIVE_SYNC_JWT_SECRET: {exc}") from None

        return cls(
            fixture_dir=Path(env.get("HIVE_SYNC_FIXTURES", str(DEFAULT_FIXTURE_DIR))),
            jwt_secret=secret,
            sync_timeout=_positive_float(env, "HIVE_SYNC_TIMEOUT", SYNC_TIMEOUT),
            poll_interval=_positive_float(env, "HIVE_SYNC_POLL_INTERVAL", POLL_INTERVAL),
        )
