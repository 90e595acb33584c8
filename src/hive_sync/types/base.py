"""Pydantic bases for our own values and for what clients send back."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Snake_case fields behind camelCase JSON keys.

    Geth headers and Engine API payloads are camelCase: the field
    `parent_hash` is read from and written to `parentHash`. Either name is
    accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrictBaseModel(CamelModel):
    """Immutable, no coercion, no unknown keys."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)


class RpcModel(CamelModel):
    """
    Immutable view of a client reply.

    Replies carry keys we do not model (`size`, `transactions`,
    `totalDifficulty`, ...), which are dropped.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)
