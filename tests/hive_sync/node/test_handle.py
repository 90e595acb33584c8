"""Tests for node handles."""

from __future__ import annotations

import pytest

from hive_sync.fixtures import Header
from hive_sync.node import NodeHandle, is_enode_url, wait_for_peer_endpoint
from hive_sync.types import EndpointUnavailable, RPCError
from tests.hive_sync.helpers import DEFAULT_ENODE, FakeClock, FakeNode, RpcFailure, run_async


class TestAddressing:
    """Ports and URLs."""

    def test_from_url(self) -> None:
        node = NodeHandle.from_url("http://10.0.0.7:8645", client="besu")
        assert (node.client, node.host, node.rpc_port) == ("besu", "10.0.0.7", 8645)
        assert node.rpc_url == "http://10.0.0.7:8645/"
        assert node.engine_url == "http://10.0.0.7:8651/"

    def test_from_url_defaults(self) -> None:
        node = NodeHandle.from_url("http://geth")
        assert node.client == "geth"
        assert node.rpc_port == 8545
        assert node.engine_port == 8551

    def test_from_url_without_host(self) -> None:
        with pytest.raises(ValueError, match="no host"):
            NodeHandle.from_url("/just/a/path")

    @pytest.mark.parametrize(
        ("value", "valid"),
        [
            (DEFAULT_ENODE, True),
            ("enode://abcd@10.0.0.2:30303", True),
            ("enr:-IS4QHCYrYZbAKW", False),
            ("enode://@10.0.0.2:30303", False),
            ("enode://abcd", False),
            ("", False),
        ],
    )
    def test_is_enode_url(self, value: str, valid: bool) -> None:
        assert is_enode_url(value) is valid


class TestHead:
    """The canonical head query."""

    def test_returns_header(self, expected: Header) -> None:
        node = FakeNode(heads=[expected])
        head = run_async(node.node_handle().head())

        assert head.block_hash() == expected.block_hash()
        assert node.calls[0].method == "eth_getBlockByNumber"
        assert node.calls[0].params == ["latest", False]

    def test_null_block_is_an_error(self) -> None:
        node = FakeNode(heads=[None])
        with pytest.raises(RPCError, match="no head block"):
            run_async(node.node_handle().head())

    def test_rpc_error(self) -> None:
        node = FakeNode(heads=[RpcFailure(message="database closed")])
        with pytest.raises(RPCError, match="database closed"):
            run_async(node.node_handle().head())

    def test_unreachable_node(self, expected: Header) -> None:
        node = FakeNode(heads=[expected])
        handle = node.node_handle(host="10.0.0.99")
        with pytest.raises(RPCError, match="network error"):
            run_async(handle.head())

    def test_invalid_header(self) -> None:
        """A block object missing most header fields."""
        node = FakeNode(heads=[{"number": "0x1"}])
        with pytest.raises(RPCError, match="invalid header"):
            run_async(node.node_handle().head())


class TestPeerEndpoint:
    """Resolving the enode URL."""

    def test_known_enode_skips_the_query(self) -> None:
        node = FakeNode()
        handle = node.node_handle(enode="enode://known@10.0.0.2:30303")
        assert run_async(handle.peer_endpoint()) == "enode://known@10.0.0.2:30303"
        assert node.calls == []

    def test_asks_admin_node_info(self) -> None:
        node = FakeNode()
        assert run_async(node.node_handle().peer_endpoint()) == DEFAULT_ENODE
        assert node.methods == ["admin_nodeInfo"]

    def test_rpc_failure_is_endpoint_unavailable(self) -> None:
        node = FakeNode(node_info_failures=1)
        with pytest.raises(EndpointUnavailable, match="node not ready"):
            run_async(node.node_handle().peer_endpoint())

    def test_missing_enode_is_endpoint_unavailable(self) -> None:
        node = FakeNode(enode=None)
        with pytest.raises(EndpointUnavailable, match="no enode"):
            run_async(node.node_handle().peer_endpoint())

    def test_add_peer(self) -> None:
        node = FakeNode()
        assert run_async(node.node_handle().add_peer(DEFAULT_ENODE)) is True
        assert node.calls[0].params == [DEFAULT_ENODE]


class TestWaitForPeerEndpoint:
    """Retrying while the node starts."""

    def test_retries_with_backoff(self) -> None:
        node = FakeNode(node_info_failures=3)
        clock = FakeClock()

        enode = run_async(
            wait_for_peer_endpoint(
                node.node_handle(),
                attempts=5,
                delay=1.0,
                backoff=2.0,
                max_delay=3.0,
                sleep=clock.sleep,
            )
        )

        assert enode == DEFAULT_ENODE
        assert clock.sleeps == [1.0, 2.0, 3.0]
        assert node.methods.count("admin_nodeInfo") == 4

    def test_gives_up_after_attempts(self) -> None:
        node = FakeNode(node_info_failures=10)
        clock = FakeClock()

        with pytest.raises(EndpointUnavailable):
            run_async(wait_for_peer_endpoint(node.node_handle(), attempts=3, sleep=clock.sleep))

        assert len(clock.sleeps) == 2
        assert node.methods.count("admin_nodeInfo") == 3

    def test_single_attempt_does_not_sleep(self) -> None:
        node = FakeNode(node_info_failures=1)
        clock = FakeClock()

        with pytest.raises(EndpointUnavailable):
            run_async(wait_for_peer_endpoint(node.node_handle(), attempts=1, sleep=clock.sleep))
        assert clock.sleeps == []

    def test_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            run_async(wait_for_peer_endpoint(FakeNode().node_handle(), attempts=0))
