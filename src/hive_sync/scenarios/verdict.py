"""Scenario verdicts."""

from __future__ import annotations

from enum import Enum

from hive_sync.types import (
    EndpointUnavailable,
    EnginePayloadRejected,
    FixtureUnavailable,
    HarnessError,
    HashMismatch,
    RPCError,
    StrictBaseModel,
    SyncTimeout,
)


class VerdictKind(Enum):
    """Why a scenario passed or failed."""

    PASSED = "passed"
    FIXTURE_UNAVAILABLE = "fixture unreadable"
    ENDPOINT_UNAVAILABLE = "peer endpoint unavailable"
    RPC_FAILED = "RPC query failed"
    ENGINE_CALL_FAILED = "engine API call failed"
    HEAD_MISMATCH = "source head is not the expected block"
    HASH_MISMATCH = "hash mismatch at matching height"
    TIMEOUT = "deadline exceeded while chain height never reached expected value"
    UNEXPECTED_ERROR = "unexpected error"

    @classmethod
    def for_error(cls, error: HarnessError) -> VerdictKind:
        """Classify a harness error."""
        # Most specific classes first: EnginePayloadRejected is an RPCError.
        if isinstance(error, FixtureUnavailable):
            return cls.FIXTURE_UNAVAILABLE
        if isinstance(error, EndpointUnavailable):
            return cls.ENDPOINT_UNAVAILABLE
        if isinstance(error, EnginePayloadRejected):
            return cls.ENGINE_CALL_FAILED
        if isinstance(error, RPCError):
            return cls.RPC_FAILED
        if isinstance(error, HashMismatch):
            return cls.HASH_MISMATCH
        if isinstance(error, SyncTimeout):
            return cls.TIMEOUT
        raise TypeError(f"no verdict for {type(error).__name__}")


class Verdict(StrictBaseModel):
    """Outcome of one scenario."""

    kind: VerdictKind
    """Classification of the outcome."""

    message: str = ""
    """Diagnostic detail."""

    @property
    def passed(self) -> bool:
        return self.kind is VerdictKind.PASSED

    @classmethod
    def success(cls, message: str = "") -> Verdict:
        return cls(kind=VerdictKind.PASSED, message=message)

    @classmethod
    def failure(cls, error: HarnessError) -> Verdict:
        """Turn an error into a failing verdict."""
        return cls(kind=VerdictKind.for_error(error), message=error.message)

    @classmethod
    def crashed(cls, exc: Exception) -> Verdict:
        """Failing verdict for an exception outside the harness error hierarchy."""
        return cls(kind=VerdictKind.UNEXPECTED_ERROR, message=f"{type(exc).__name__}: {exc}")

    def __str__(self) -> str:
        if self.passed:
            return f"pass{': ' + self.message if self.message else ''}"
        return f"fail ({self.kind.value}): {self.message}"
