"""Pre-recorded Engine API requests (`headnewpayload.json`, `headfcu.json`)."""

from __future__ import annotations

from pydantic import AliasChoices, Field, JsonValue

from hive_sync.types import Hash32, RpcModel


class EngineCall(RpcModel):
    """
    A JSON-RPC request recorded by the chain generator.

    The parameters are opaque: they are sent to the client exactly as
    recorded, so the harness does not depend on the payload version.
    Envelope keys such as `jsonrpc` and `id` are ignored.
    """

    method: str = Field(validation_alias=AliasChoices("method", "Method"), min_length=1)
    """Engine API method, e.g. `engine_newPayloadV4`."""

    params: tuple[JsonValue, ...] = Field(validation_alias=AliasChoices("params", "Params"))
    """Positional parameters, in order."""

    def head_block_hash(self) -> Hash32 | None:
        """
        Return `headBlockHash` from a forkchoiceUpdated call's first parameter.

        Returns None when the call does not carry a forkchoice state.
        """
        if not self.params:
            return None
        state = self.params[0]
        if not isinstance(state, dict):
            return None
        value = state.get("headBlockHash")
        if not isinstance(value, str):
            return None
        return Hash32(value)
