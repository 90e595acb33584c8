"""
Sync suite timing constants.

Defaults for the bounded operations of a scenario: single RPC calls, the
poll interval, the overall sync deadline, and peer endpoint resolution.
"""

from __future__ import annotations

from typing import Final

SYNC_TIMEOUT: Final[float] = 60.0
"""Seconds before a sync is considered stalled or failed."""

POLL_INTERVAL: Final[float] = 1.0
"""Seconds between two head queries of the wait loop."""

HEAD_QUERY_TIMEOUT: Final[float] = 5.0
"""Timeout of a single head query in seconds."""

ENGINE_CALL_TIMEOUT: Final[float] = 10.0
"""Timeout of a single Engine API call in seconds."""

PEER_ENDPOINT_ATTEMPTS: Final[int] = 10
"""How often to ask a node for its enode before giving up."""

PEER_ENDPOINT_DELAY: Final[float] = 1.0
"""Initial delay between enode lookups in seconds."""

PEER_ENDPOINT_BACKOFF: Final[float] = 2.0
"""Multiplier applied to the delay after each failed lookup."""

PEER_ENDPOINT_MAX_DELAY: Final[float] = 10.0
"""Upper bound on the delay between enode lookups in seconds."""
