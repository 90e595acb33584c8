"""JSON-RPC transport and Engine API authentication."""

from .auth import DEFAULT_JWT_SECRET, JWT_ALGORITHM, JwtAuth, JwtSecret, make_token
from .client import DEFAULT_TIMEOUT, JsonRpcClient

__all__ = [
    "DEFAULT_JWT_SECRET",
    "DEFAULT_TIMEOUT",
    "JWT_ALGORITHM",
    "JsonRpcClient",
    "JwtAuth",
    "JwtSecret",
    "make_token",
]
