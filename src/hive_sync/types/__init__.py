"""Reusable type definitions for the sync conformance harness."""

from .base import CamelModel, RpcModel, StrictBaseModel
from .byte_arrays import ZERO_HASH, Address, BaseBytes, Bloom, Bytes8, Hash32, HexBytes
from .exceptions import (
    EndpointUnavailable,
    EnginePayloadRejected,
    FixtureUnavailable,
    HarnessError,
    HashMismatch,
    RPCError,
    SyncTimeout,
)
from .quantity import Quantity, parse_quantity, to_quantity

__all__ = [
    # Models
    "CamelModel",
    "RpcModel",
    "StrictBaseModel",
    # Byte and integer types
    "Address",
    "BaseBytes",
    "Bloom",
    "Bytes8",
    "Hash32",
    "HexBytes",
    "Quantity",
    "ZERO_HASH",
    "parse_quantity",
    "to_quantity",
    # Exceptions
    "HarnessError",
    "FixtureUnavailable",
    "EndpointUnavailable",
    "RPCError",
    "EnginePayloadRejected",
    "HashMismatch",
    "SyncTimeout",
]
