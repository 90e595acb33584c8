"""Handles on running execution clients."""

from .handle import (
    DEFAULT_RPC_PORT,
    ENGINE_PORT_OFFSET,
    NodeHandle,
    is_enode_url,
    wait_for_peer_endpoint,
)

__all__ = [
    "DEFAULT_RPC_PORT",
    "ENGINE_PORT_OFFSET",
    "NodeHandle",
    "is_enode_url",
    "wait_for_peer_endpoint",
]
