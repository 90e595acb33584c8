"""Tests for the JSON-RPC client."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from hive_sync.rpc import DEFAULT_TIMEOUT, JsonRpcClient
from hive_sync.types import EnginePayloadRejected, RPCError
from tests.hive_sync.helpers import run_async

URL = "http://10.0.0.2:8545/"


def _reply(build: Callable[[dict[str, Any]], httpx.Response]) -> httpx.MockTransport:
    """A transport answering every request with `build(request_body)`."""

    def handler(request: httpx.Request) -> httpx.Response:
        return build(json.loads(request.content))

    return httpx.MockTransport(handler)


def _result(value: Any) -> httpx.MockTransport:
    return _reply(
        lambda body: httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": value})
    )


def _call(transport: httpx.AsyncBaseTransport, method: str = "eth_chainId", **kwargs: Any) -> Any:
    async def run() -> Any:
        async with JsonRpcClient(URL, transport=transport, **kwargs) as rpc:
            return await rpc.call(method)

    return run_async(run())


class TestSuccessfulCalls:
    """Requests and results."""

    def test_returns_result(self) -> None:
        assert _call(_result("0x1")) == "0x1"

    def test_null_result_is_returned(self) -> None:
        assert _call(_result(None)) is None

    def test_request_envelope_and_ids(self) -> None:
        seen: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": True})

        async def run() -> None:
            async with JsonRpcClient(URL, transport=httpx.MockTransport(handler)) as rpc:
                await rpc.call("eth_getBlockByNumber", ["latest", False])
                await rpc.call("admin_nodeInfo")

        run_async(run())
        assert seen == [
            {
                "jsonrpc": "2.0",
                "id": 1,
                "method": "eth_getBlockByNumber",
                "params": ["latest", False],
            },
            {"jsonrpc": "2.0", "id": 2, "method": "admin_nodeInfo", "params": []},
        ]

    def test_call_outside_context_raises(self) -> None:
        async def run() -> None:
            await JsonRpcClient(URL).call("eth_chainId")

        with pytest.raises(RuntimeError, match="outside of 'async with'"):
            run_async(run())

    def test_default_timeout(self) -> None:
        assert JsonRpcClient(URL).timeout == DEFAULT_TIMEOUT == 5.0


class TestFailures:
    """Every failure becomes an RPCError."""

    def test_error_object(self) -> None:
        transport = _reply(
            lambda body: httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32601, "message": "method not found"},
                },
            )
        )
        with pytest.raises(RPCError) as info:
            _call(transport, "admin_nodeInfo")
        assert info.value.code == -32601
        assert info.value.message == "admin_nodeInfo: method not found (code -32601)"

    def test_http_status(self) -> None:
        transport = _reply(lambda body: httpx.Response(401, text="missing token"))
        with pytest.raises(RPCError, match="HTTP 401: missing token"):
            _call(transport)

    def test_connection_refused(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RPCError, match="network error") as info:
            _call(httpx.MockTransport(handler))
        assert info.value.code is None

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RPCError, match=r"timed out after 5\.0s"):
            _call(httpx.MockTransport(handler))

    def test_invalid_json(self) -> None:
        transport = _reply(lambda body: httpx.Response(200, text="<html>"))
        with pytest.raises(RPCError, match="invalid JSON"):
            _call(transport)

    def test_undecodable_body(self) -> None:
        """A body that is not UTF-8 fails as an RPC error, not a UnicodeDecodeError."""
        transport = _reply(
            lambda body: httpx.Response(
                200, content=b'{"jsonrpc":"2.0","id":1,"result":"\x80"}'
            )
        )
        with pytest.raises(RPCError, match="invalid JSON"):
            _call(transport)

    def test_non_object_response(self) -> None:
        transport = _reply(lambda body: httpx.Response(200, json=[1, 2]))
        with pytest.raises(RPCError, match="not a JSON object"):
            _call(transport)

    def test_id_mismatch(self) -> None:
        transport = _reply(
            lambda body: httpx.Response(200, json={"jsonrpc": "2.0", "id": 99, "result": 1})
        )
        with pytest.raises(RPCError, match="response id 99 != 1"):
            _call(transport)

    def test_missing_result(self) -> None:
        transport = _reply(
            lambda body: httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"]})
        )
        with pytest.raises(RPCError, match="neither result nor error"):
            _call(transport)

    def test_error_class_is_configurable(self) -> None:
        transport = _reply(lambda body: httpx.Response(401, text="bad token"))
        with pytest.raises(EnginePayloadRejected):
            _call(transport, "engine_newPayloadV3", error_class=EnginePayloadRejected)
