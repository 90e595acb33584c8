"""Wait loop state machine."""

from __future__ import annotations

from enum import Enum, auto


class SyncState(Enum):
    """
    States of one wait-for-sync run.

    State Machine Diagram
    ---------------------
    ::

                    +--> SUCCEEDED
                    |
        POLLING ----+--> MISMATCHED
           ^  |     |
           +--+     +--> TIMED_OUT
                    |
                    +--> ERRORED

    POLLING is the only non-terminal state. Each poll either stays in
    POLLING or ends the run; a finished run is never resumed.

    Transitions
    -----------
    POLLING -> SUCCEEDED
        - Head number equals the expected number and hashes match
    POLLING -> MISMATCHED
        - Head number equals the expected number but hashes differ.
          An equal-height fork is final, so the loop stops at once.
    POLLING -> TIMED_OUT
        - Deadline passed before the expected height was seen
    POLLING -> ERRORED
        - A head query failed. A broken RPC channel is not expected to
          heal within the test, so there is no retry.
    """

    POLLING = auto()
    """Waiting for the node to reach the expected height."""

    SUCCEEDED = auto()
    """The node's head is the expected block."""

    MISMATCHED = auto()
    """The node is at the expected height on a different block."""

    TIMED_OUT = auto()
    """The expected height was not reached in time."""

    ERRORED = auto()
    """A head query failed."""

    def can_transition_to(self, target: SyncState) -> bool:
        """Check if transition to target state is valid."""
        return target in _VALID_TRANSITIONS.get(self, set())

    @property
    def is_terminal(self) -> bool:
        """Check if the run is over in this state."""
        return self is not SyncState.POLLING


_VALID_TRANSITIONS: dict[SyncState, set[SyncState]] = {
    SyncState.POLLING: {
        SyncState.POLLING,
        SyncState.SUCCEEDED,
        SyncState.MISMATCHED,
        SyncState.TIMED_OUT,
        SyncState.ERRORED,
    },
}
"""Valid state transitions; terminal states have none."""
