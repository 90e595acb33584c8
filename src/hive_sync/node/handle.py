"""
Handle on a running execution client.

A handle knows where a client listens and offers the few queries the suite
needs. It holds no connection state: every query opens and closes its own
JSON-RPC client, so handles are cheap to copy and safe to share between
concurrent scenarios.

Endpoints
---------
- Regular JSON-RPC on `rpc_port` (8545 by default)
- Engine API on `rpc_port + 6` (8551 by default), JWT protected
- devp2p, advertised through the enode URL
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Final

import httpx
from pydantic import ValidationError

from hive_sync.fixtures import Header
from hive_sync.rpc import JsonRpcClient
from hive_sync.sync.config import (
    HEAD_QUERY_TIMEOUT,
    PEER_ENDPOINT_ATTEMPTS,
    PEER_ENDPOINT_BACKOFF,
    PEER_ENDPOINT_DELAY,
    PEER_ENDPOINT_MAX_DELAY,
)
from hive_sync.types import EndpointUnavailable, RPCError

logger = logging.getLogger(__name__)

DEFAULT_RPC_PORT: Final = 8545
"""Port of the regular JSON-RPC server."""

ENGINE_PORT_OFFSET: Final = 6
"""Distance from the RPC port to the Engine API port (8545 -> 8551)."""

ENODE_SCHEME: Final = "enode://"


def is_enode_url(value: str) -> bool:
    """Check that `value` looks like `enode://<pubkey>@<host>:<port>`."""
    if not value.startswith(ENODE_SCHEME):
        return False
    pubkey, sep, address = value[len(ENODE_SCHEME) :].partition("@")
    return bool(pubkey) and bool(sep) and bool(address)


@dataclass(frozen=True, slots=True)
class NodeHandle:
    """Network endpoints of one client instance."""

    client: str
    """Client type, e.g. "go-ethereum". Used in test names and logs."""

    host: str
    """IP address or hostname of the client container."""

    rpc_port: int = DEFAULT_RPC_PORT
    """Port of the regular JSON-RPC server."""

    enode: str | None = None
    """Known enode URL. When None it is asked from the node on demand."""

    head_timeout: float = HEAD_QUERY_TIMEOUT
    """Timeout of a single head query."""

    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False, compare=False)
    """Custom HTTP transport. Tests use it to stand in for a real client."""

    @classmethod
    def from_url(
        cls,
        url: str,
        client: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> NodeHandle:
        """
        Build a handle from the node's RPC URL, e.g. `http://10.0.0.2:8545`.

        The client name defaults to the host when not given.
        """
        parsed = httpx.URL(url)
        if not parsed.host:
            raise ValueError(f"RPC URL has no host: {url!r}")
        port = parsed.port or DEFAULT_RPC_PORT
        return cls(
            client=client or parsed.host,
            host=parsed.host,
            rpc_port=port,
            transport=transport,
        )

    @property
    def engine_port(self) -> int:
        """Port of the Engine API."""
        return self.rpc_port + ENGINE_PORT_OFFSET

    @property
    def rpc_url(self) -> str:
        return f"http://{self.host}:{self.rpc_port}/"

    @property
    def engine_url(self) -> str:
        return f"http://{self.host}:{self.engine_port}/"

    def rpc(self, timeout: float | None = None) -> JsonRpcClient:
        """A JSON-RPC client for the node's regular RPC port."""
        return JsonRpcClient(
            self.rpc_url,
            timeout=self.head_timeout if timeout is None else timeout,
            transport=self.transport,
        )

    async def peer_endpoint(self) -> str:
        """
        Return the node's dialable enode URL.

        Raises:
            EndpointUnavailable: If the node cannot be asked or has not
                published a valid enode yet.
        """
        if self.enode is not None:
            return self.enode

        try:
            async with self.rpc() as rpc:
                info = await rpc.call("admin_nodeInfo")
        except RPCError as exc:
            raise EndpointUnavailable(f"{self.client}: {exc.message}") from exc

        enode = info.get("enode") if isinstance(info, dict) else None
        if not isinstance(enode, str) or not is_enode_url(enode):
            raise EndpointUnavailable(f"{self.client}: no enode in admin_nodeInfo: {enode!r}")
        return enode

    async def head(self) -> Header:
        """
        Return the header of the node's canonical head block.

        Raises:
            RPCError: If the call fails, returns null, or returns something
                that is not a header.
        """
        method = "eth_getBlockByNumber"
        async with self.rpc() as rpc:
            block = await rpc.call(method, ["latest", False])

        if block is None:
            raise RPCError(method, "node returned no head block")
        try:
            return Header.model_validate(block)
        except ValidationError as exc:
            raise RPCError(method, f"invalid header: {exc}") from exc

    async def add_peer(self, enode: str) -> bool:
        """
        Ask the node to dial `enode`.

        Returns:
            The boolean the node reports.

        Raises:
            RPCError: If the call fails.
        """
        async with self.rpc() as rpc:
            result = await rpc.call("admin_addPeer", [enode])
        return bool(result)


async def wait_for_peer_endpoint(
    node: NodeHandle,
    *,
    attempts: int = PEER_ENDPOINT_ATTEMPTS,
    delay: float = PEER_ENDPOINT_DELAY,
    backoff: float = PEER_ENDPOINT_BACKOFF,
    max_delay: float = PEER_ENDPOINT_MAX_DELAY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    """
    Resolve a node's enode, retrying while the node is still starting.

    The delay grows by `backoff` after each failure, capped at `max_delay`.

    Raises:
        EndpointUnavailable: The error of the last attempt.
        ValueError: If `attempts` is less than one.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for _ in range(attempts - 1):
        try:
            return await node.peer_endpoint()
        except EndpointUnavailable as exc:
            logger.debug(f"{node.client} enode not ready ({exc.message}), retry in {delay:.1f}s")
            await sleep(delay)
            delay = min(delay * backoff, max_delay)

    return await node.peer_endpoint()
