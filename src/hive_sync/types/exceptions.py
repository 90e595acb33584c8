"""Exception hierarchy for the sync conformance harness."""

from __future__ import annotations


class HarnessError(Exception):
    """
    Base exception for every failure a scenario can report.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class FixtureUnavailable(HarnessError):
    """
    Raised when a test artifact is missing or does not parse.

    Fatal: the scenario aborts before any network activity.

    Attributes:
        key: Logical fixture name, e.g. "headblock.json".
        reason: What went wrong while reading or validating it.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"fixture {key} unavailable: {reason}")


class EndpointUnavailable(HarnessError):
    """Raised when a node has not published a dialable peer-to-peer address."""


class RPCError(HarnessError):
    """
    Raised on a transport or protocol failure of a single JSON-RPC call.

    Attributes:
        method: The JSON-RPC method that failed.
        code: JSON-RPC error code, or None for transport-level failures.
        reason: Description of the failure.
    """

    def __init__(self, method: str, reason: str, *, code: int | None = None) -> None:
        self.method = method
        self.code = code
        self.reason = reason

        msg = f"{method}: {reason}"
        if code is not None:
            msg = f"{msg} (code {code})"
        super().__init__(msg)


class EnginePayloadRejected(RPCError):
    """
    Raised when an Engine API call fails at the transport or protocol level.

    This includes the endpoint refusing the JWT credential. A non-VALID
    payload status in a successful response is not an error.
    """


class HashMismatch(HarnessError):
    """
    Raised when a node reached the expected height on a different block.

    Attributes:
        number: The block height at which hashes were compared.
        got: Hash reported by the node (hex).
        want: Expected hash (hex).
    """

    def __init__(self, number: int, got: str, want: str) -> None:
        self.number = number
        self.got = got
        self.want = want
        super().__init__(f"wrong head hash {got} at block {number}, want {want}")


class SyncTimeout(HarnessError):
    """
    Raised when the expected height was not reached before the deadline.

    Attributes:
        elapsed: Seconds waited.
        last_number: Last head number the node reported.
    """

    def __init__(self, elapsed: float, last_number: int) -> None:
        self.elapsed = elapsed
        self.last_number = last_number
        super().__init__(f"timeout ({elapsed:.0f}s elapsed, current head is {last_number})")
