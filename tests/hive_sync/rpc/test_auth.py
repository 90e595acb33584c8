"""Tests for Engine API JWT authentication."""

from __future__ import annotations

import httpx
import jwt
import pytest

from hive_sync.rpc import DEFAULT_JWT_SECRET, JWT_ALGORITHM, JwtAuth, JwtSecret, make_token


class TestJwtSecret:
    """The shared secret."""

    def test_default_is_hive_secret(self) -> None:
        assert bytes(DEFAULT_JWT_SECRET) == b"secretsecretsecretsecretsecretse"

    def test_from_hex(self) -> None:
        assert JwtSecret("0x" + "7365" * 16) == b"se" * 16

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            JwtSecret(b"short")

    def test_repr_is_redacted(self) -> None:
        assert repr(DEFAULT_JWT_SECRET) == "JwtSecret(<redacted>)"


class TestToken:
    """Signed tokens."""

    def test_token_carries_iat(self) -> None:
        token = make_token(DEFAULT_JWT_SECRET, 1_700_000_000)
        claims = jwt.decode(token, bytes(DEFAULT_JWT_SECRET), algorithms=[JWT_ALGORITHM])
        assert claims == {"iat": 1_700_000_000}

    def test_header_uses_hs256(self) -> None:
        token = make_token(DEFAULT_JWT_SECRET, 1)
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_other_secret_fails_verification(self) -> None:
        token = make_token(JwtSecret(b"\x01" * 32), 1_700_000_000)
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, bytes(DEFAULT_JWT_SECRET), algorithms=[JWT_ALGORITHM])


class TestJwtAuth:
    """The httpx auth flow."""

    def test_every_request_gets_a_fresh_token(self) -> None:
        ticks = iter([100.0, 200.0])
        auth = JwtAuth(DEFAULT_JWT_SECRET, clock=lambda: next(ticks))
        seen: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            scheme, _, token = request.headers["Authorization"].partition(" ")
            assert scheme == "Bearer"
            claims = jwt.decode(token, bytes(DEFAULT_JWT_SECRET), algorithms=[JWT_ALGORITHM])
            seen.append(claims["iat"])
            return httpx.Response(200)

        with httpx.Client(auth=auth, transport=httpx.MockTransport(handler)) as client:
            client.post("http://10.0.0.2:8551/")
            client.post("http://10.0.0.2:8551/")

        assert seen == [100, 200]
