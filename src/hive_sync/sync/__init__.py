"""
Waiting for a client to sync.

After the Engine API handshake a client downloads the chain from its peers
on its own. This package watches it do so: it polls the reported head until
it is the expected block, until it turns out to be a different block at the
same height, or until time runs out.
"""

from __future__ import annotations

__all__ = [
    "SyncState",
    "SyncResult",
    "HeadSource",
    "wait_for_sync",
    "SYNC_TIMEOUT",
    "POLL_INTERVAL",
    "HEAD_QUERY_TIMEOUT",
]

from .config import HEAD_QUERY_TIMEOUT, POLL_INTERVAL, SYNC_TIMEOUT
from .states import SyncState
from .wait import HeadSource, SyncResult, wait_for_sync
