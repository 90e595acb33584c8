"""Engine API handshake that points a client at the sync target."""

from .trigger import EXPECTED_STATUSES, ForkchoiceResponse, PayloadStatus, trigger_sync

__all__ = [
    "EXPECTED_STATUSES",
    "ForkchoiceResponse",
    "PayloadStatus",
    "trigger_sync",
]
