"""
Engine API authentication.

The Engine API is protected by a JWT bearer token. The consensus side and
the execution client share a 32-byte secret; every HTTP request carries a
freshly signed HS256 token whose only required claim is `iat`. Clients reject
tokens whose `iat` is more than 60 seconds away from their own clock, so the
token is re-issued for each request instead of being cached.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Generator
from typing import Final

import httpx
import jwt

from hive_sync.types import BaseBytes

JWT_ALGORITHM: Final = "HS256"
"""The only algorithm the Engine API requires clients to accept."""


class JwtSecret(BaseBytes):
    """The 32-byte secret shared with a client's Engine API."""

    LENGTH = 32

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks.
        return "JwtSecret(<redacted>)"


DEFAULT_JWT_SECRET: Final = JwtSecret(b"secretsecretsecretsecretsecretse")
"""Secret that Hive client images configure for their Engine API."""


def make_token(secret: JwtSecret, issued_at: int) -> str:
    """Sign an Engine API token issued at `issued_at` (Unix seconds)."""
    return jwt.encode({"iat": issued_at}, bytes(secret), algorithm=JWT_ALGORITHM)


class JwtAuth(httpx.Auth):
    """
    httpx authentication flow that signs a new token for every request.

    Example::

        async with httpx.AsyncClient(auth=JwtAuth(secret)) as client:
            ...
    """

    def __init__(self, secret: JwtSecret, clock: Callable[[], float] = time.time) -> None:
        self._secret = secret
        self._clock = clock

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = make_token(self._secret, int(self._clock()))
        request.headers["Authorization"] = f"Bearer {token}"
        yield request
