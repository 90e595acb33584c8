"""
Minimal asynchronous JSON-RPC 2.0 client.

One client talks to one endpoint, either a node's regular RPC port or its
Engine API port. Every failure of a call, whether it happens in the transport
(connection refused, timeout, HTTP 401) or in the protocol (malformed
response, JSON-RPC error object), surfaces as a single `RPCError`. There are
no retries here: callers decide whether a failure is worth retrying.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Any, Final

import httpx

from hive_sync.types import RPCError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final[float] = 5.0
"""Per-call timeout in seconds."""


class JsonRpcClient:
    """
    JSON-RPC client over HTTP.

    Use as an async context manager so the underlying connection pool is
    closed when the caller is done::

        async with JsonRpcClient("http://10.0.0.2:8545/") as rpc:
            block = await rpc.call("eth_getBlockByNumber", ["latest", False])
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        error_class: type[RPCError] = RPCError,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._auth = auth
        self._transport = transport
        self._error_class = error_class
        self._ids = itertools.count(1)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> JsonRpcClient:
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            auth=self._auth,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, params: Sequence[Any] = ()) -> Any:
        """
        Invoke `method` and return its `result` member.

        Raises:
            RPCError: On transport failure, HTTP error status, a malformed
                response, or a JSON-RPC error object. The concrete class is
                the client's `error_class`.
        """
        if self._client is None:
            raise RuntimeError("JsonRpcClient used outside of 'async with'")

        request_id = next(self._ids)
        body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": list(params)}

        try:
            response = await self._client.post(self.url, json=body)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise self._error_class(method, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise self._error_class(
                method, f"HTTP {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except httpx.RequestError as exc:
            raise self._error_class(method, f"network error: {exc}") from exc

        try:
            reply = response.json()
        except ValueError as exc:
            # Covers undecodable bytes as well as malformed JSON.
            raise self._error_class(method, f"invalid JSON response: {exc}") from exc

        if not isinstance(reply, dict):
            raise self._error_class(method, "response is not a JSON object")
        if reply.get("id") != request_id:
            raise self._error_class(method, f"response id {reply.get('id')!r} != {request_id}")

        error = reply.get("error")
        if error is not None:
            if isinstance(error, dict):
                code = error.get("code")
                raise self._error_class(
                    method,
                    str(error.get("message", "unknown error")),
                    code=code if isinstance(code, int) else None,
                )
            raise self._error_class(method, f"malformed error member: {error!r}")

        if "result" not in reply:
            raise self._error_class(method, "response has neither result nor error")

        return reply["result"]
