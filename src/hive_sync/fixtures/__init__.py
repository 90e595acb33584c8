"""Test fixture loading: expected head, Engine API calls, exported chain."""

from .accessor import (
    CHAIN,
    FIXTURE_KEYS,
    FORK_ENV,
    GENESIS,
    HEAD_BLOCK,
    HEAD_FCU,
    HEAD_NEW_PAYLOAD,
    FixtureAccessor,
)
from .chain import ChainBlock, decode_chain
from .engine_call import EngineCall
from .header import Header

__all__ = [
    "FixtureAccessor",
    "FIXTURE_KEYS",
    "GENESIS",
    "CHAIN",
    "FORK_ENV",
    "HEAD_BLOCK",
    "HEAD_NEW_PAYLOAD",
    "HEAD_FCU",
    "ChainBlock",
    "decode_chain",
    "EngineCall",
    "Header",
]
