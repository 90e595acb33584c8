"""
Engine Trigger Protocol
=======================

A post-merge execution client does not pick a sync target by itself. It only
starts downloading once the consensus layer tells it about a head block.
The harness plays the consensus layer for exactly one step:

1. `engine_newPayloadVX` delivers the head block.
2. `engine_forkchoiceUpdatedVX` declares it the canonical head.

Both requests were recorded by the chain generator and are replayed
verbatim, so the same code drives any fork's payload version.

A freshly started client normally answers SYNCING: it knows the target but
still has to fetch the chain from its peers. That is the expected outcome,
and any other status is only logged. Whether the node really converges is
decided by the wait loop, not here.
"""

from __future__ import annotations

import logging
from typing import Final, Literal

from pydantic import ValidationError

from hive_sync.fixtures import EngineCall
from hive_sync.node import NodeHandle
from hive_sync.rpc import JsonRpcClient, JwtAuth, JwtSecret
from hive_sync.sync.config import ENGINE_CALL_TIMEOUT
from hive_sync.types import EnginePayloadRejected, Hash32, RpcModel

logger = logging.getLogger(__name__)

PayloadStatusKind = Literal["VALID", "INVALID", "SYNCING", "ACCEPTED", "INVALID_BLOCK_HASH"]

EXPECTED_STATUSES: Final[frozenset[str]] = frozenset({"VALID", "SYNCING", "ACCEPTED"})
"""Statuses that mean the client took the head on board."""


class PayloadStatus(RpcModel):
    """`PayloadStatusV1`, the answer to newPayload and part of forkchoiceUpdated."""

    status: PayloadStatusKind
    latest_valid_hash: Hash32 | None = None
    validation_error: str | None = None


class ForkchoiceResponse(RpcModel):
    """Answer to `engine_forkchoiceUpdated`."""

    payload_status: PayloadStatus
    payload_id: str | None = None


def _log_status(node: NodeHandle, method: str, status: PayloadStatus) -> None:
    if status.status in EXPECTED_STATUSES:
        logger.info(f"{node.client}: {method} -> {status.status}")
    else:
        logger.warning(
            f"{node.client}: {method} -> {status.status} "
            f"(latestValidHash={status.latest_valid_hash!r}, error={status.validation_error!r})"
        )


async def _send(engine: JsonRpcClient, call: EngineCall, node: NodeHandle) -> object:
    logger.info(f"{node.client}: {call.method}: {list(call.params)}")
    result = await engine.call(call.method, call.params)
    logger.info(f"{node.client}: response: {result}")
    return result


async def trigger_sync(
    node: NodeHandle,
    new_payload: EngineCall,
    forkchoice: EngineCall,
    jwt_secret: JwtSecret,
    *,
    timeout: float = ENGINE_CALL_TIMEOUT,
) -> None:
    """
    Point `node` at the fixture head with newPayload + forkchoiceUpdated.

    Each call is sent exactly once, in this order.

    Raises:
        EnginePayloadRejected: If either call fails in transport or protocol,
            including a rejected JWT. Response statuses are never fatal.
    """
    engine = JsonRpcClient(
        node.engine_url,
        timeout=timeout,
        auth=JwtAuth(jwt_secret),
        transport=node.transport,
        error_class=EnginePayloadRejected,
    )
    async with engine:
        result = await _send(engine, new_payload, node)
        try:
            _log_status(node, new_payload.method, PayloadStatus.model_validate(result))
        except ValidationError:
            logger.warning(f"{node.client}: unrecognised {new_payload.method} response: {result}")

        result = await _send(engine, forkchoice, node)
        try:
            response = ForkchoiceResponse.model_validate(result)
            _log_status(node, forkchoice.method, response.payload_status)
        except ValidationError:
            logger.warning(f"{node.client}: unrecognised {forkchoice.method} response: {result}")
