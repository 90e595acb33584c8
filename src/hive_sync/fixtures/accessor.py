"""
Fixture Accessor
================

Loads the pre-generated chain artifacts the sync suite is built around.

Fixture Set
-----------
The chain generator writes one directory per test chain:

- `genesis.json`: genesis block and allocations, handed to every client
- `chain.rlp`: the full exported chain, imported by the source at startup
- `forkenv.json`: client parameters (fork activation times, chain id)
- `headblock.json`: the header every node must end up on
- `headnewpayload.json`, `headfcu.json`: Engine API calls that make a
  fresh client aware of that head

The accessor reads each file at most once and always hands out the same
immutable value afterwards.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from hive_sync.types import FixtureUnavailable
from hive_sync.types.rlp import RLPDecodingError

from .chain import ChainBlock, decode_chain
from .engine_call import EngineCall
from .header import Header

logger = logging.getLogger(__name__)

GENESIS: Final = "genesis.json"
CHAIN: Final = "chain.rlp"
FORK_ENV: Final = "forkenv.json"
HEAD_BLOCK: Final = "headblock.json"
HEAD_NEW_PAYLOAD: Final = "headnewpayload.json"
HEAD_FCU: Final = "headfcu.json"

FIXTURE_KEYS: Final[tuple[str, ...]] = (
    GENESIS,
    CHAIN,
    FORK_ENV,
    HEAD_BLOCK,
    HEAD_NEW_PAYLOAD,
    HEAD_FCU,
)
"""Every logical fixture name the accessor understands."""

_FORK_ENV_ADAPTER: Final = TypeAdapter(dict[str, str])
_GENESIS_ADAPTER: Final = TypeAdapter(dict[str, Any])


class FixtureAccessor:
    """
    Read-only access to one fixture directory.

    Example::

        fixtures = FixtureAccessor(Path("chain"))
        expected = fixtures.expected_header()
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self._cache: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"FixtureAccessor({str(self.root)!r})"

    def path(self, key: str) -> Path:
        """Filesystem location of a fixture."""
        return self.root / key

    def load(self, key: str) -> Any:
        """
        Load and validate the fixture named `key`.

        Raises:
            FixtureUnavailable: If the key is unknown, or the file is missing,
                unreadable, or does not parse into its expected shape.
        """
        if key in self._cache:
            return self._cache[key]

        if key not in FIXTURE_KEYS:
            raise FixtureUnavailable(key, "unknown fixture")

        try:
            data = self.path(key).read_bytes()
        except OSError as exc:
            raise FixtureUnavailable(key, exc.strerror or str(exc)) from exc

        try:
            value = self._parse(key, data)
        except (ValidationError, ValueError, RLPDecodingError) as exc:
            raise FixtureUnavailable(key, str(exc)) from exc

        logger.debug(f"Loaded fixture {key} from {self.root}")
        self._cache[key] = value
        return value

    @staticmethod
    def _parse(key: str, data: bytes) -> Any:
        """Turn raw file content into the value for `key`."""
        if key == CHAIN:
            blocks = decode_chain(data)
            if not blocks:
                raise ValueError("chain file holds no blocks")
            return tuple(blocks)
        if key == HEAD_BLOCK:
            return Header.model_validate_json(data)
        if key in (HEAD_NEW_PAYLOAD, HEAD_FCU):
            return EngineCall.model_validate_json(data)
        if key == FORK_ENV:
            return _FORK_ENV_ADAPTER.validate_json(data)
        # Genesis is passed to clients untouched. Only require a JSON object.
        return _GENESIS_ADAPTER.validate_python(json.loads(data))

    def expected_header(self) -> Header:
        """The header every node must converge on."""
        return self.load(HEAD_BLOCK)

    def new_payload_call(self) -> EngineCall:
        """The recorded `engine_newPayload` request for the head block."""
        return self.load(HEAD_NEW_PAYLOAD)

    def forkchoice_call(self) -> EngineCall:
        """The recorded `engine_forkchoiceUpdated` request for the head block."""
        return self.load(HEAD_FCU)

    def fork_environment(self) -> dict[str, str]:
        """Client parameters from `forkenv.json`, as a fresh copy."""
        return dict(self.load(FORK_ENV))

    def genesis(self) -> dict[str, Any]:
        """The genesis document handed to clients."""
        return self.load(GENESIS)

    def chain(self) -> tuple[ChainBlock, ...]:
        """The blocks of `chain.rlp`, in order."""
        return self.load(CHAIN)

    def check_consistency(self) -> list[str]:
        """
        Cross-check the fixture files against each other.

        Verifies that `chain.rlp` ends at the expected head and that the
        forkchoice call points at it. The scenarios assume this holds and do
        not call it.

        Returns:
            Human-readable problems; empty when the fixtures agree.
        """
        problems: list[str] = []
        try:
            expected = self.expected_header()
        except FixtureUnavailable as exc:
            return [exc.message]

        want = expected.block_hash()
        if expected.reported_hash is not None and expected.reported_hash != want:
            problems.append(
                f"{HEAD_BLOCK}: hash field {expected.reported_hash.to_0x()} "
                f"does not match computed hash {want.to_0x()}"
            )

        try:
            last = self.chain()[-1].header
            if last.block_hash() != want:
                problems.append(
                    f"{CHAIN}: last block {last.describe()} is not the expected head "
                    f"{expected.describe()}"
                )
        except FixtureUnavailable as exc:
            problems.append(exc.message)

        try:
            head = self.forkchoice_call().head_block_hash()
            if head is None:
                problems.append(f"{HEAD_FCU}: no headBlockHash in forkchoice state")
            elif head != want:
                problems.append(
                    f"{HEAD_FCU}: headBlockHash {head.to_0x()} is not the expected "
                    f"head {want.to_0x()}"
                )
        except (FixtureUnavailable, ValueError) as exc:
            problems.append(str(exc))

        for key in (GENESIS, FORK_ENV, HEAD_NEW_PAYLOAD):
            try:
                self.load(key)
            except FixtureUnavailable as exc:
                problems.append(exc.message)

        return problems
