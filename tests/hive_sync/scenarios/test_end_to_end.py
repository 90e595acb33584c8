"""The whole suite against fake clients served over real HTTP."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from aiohttp import web

from hive_sync.config import SimulatorConfig
from hive_sync.fixtures import FixtureAccessor, Header
from hive_sync.node import NodeHandle
from hive_sync.scenarios import BOOTNODE_PARAMETER, SuiteReport, run_suite
from tests.hive_sync.helpers import FakeNode, run_async

SOURCE_PORT = 15545
SINK_PORT = 15645


async def _serve(node: FakeNode) -> list[web.AppRunner]:
    """Start the node's RPC and Engine API servers on localhost."""
    runners = []
    for port in (node.rpc_port, node.engine_port):
        runner = web.AppRunner(node.aiohttp_app(port))
        await runner.setup()
        await web.TCPSite(runner, node.host, port).start()
        runners.append(runner)
    return runners


class TestEndToEnd:
    """Source verification and sync over the network stack."""

    def test_suite_over_http(
        self, chain: list[Header], fixtures: FixtureAccessor, config: SimulatorConfig
    ) -> None:
        source = FakeNode(
            client="go-ethereum", host="127.0.0.1", rpc_port=SOURCE_PORT, heads=[chain[-1]]
        )
        sink = FakeNode(
            client="reth",
            host="127.0.0.1",
            rpc_port=SINK_PORT,
            heads=[chain[0]],
            heads_after_trigger=list(chain),
        )
        launched: list[Mapping[str, str]] = []

        async def launch_sinks(params: Mapping[str, str]) -> Sequence[NodeHandle]:
            launched.append(params)
            return [NodeHandle(client=sink.client, host=sink.host, rpc_port=sink.rpc_port)]

        async def run_test() -> SuiteReport:
            runners = await _serve(source) + await _serve(sink)
            try:
                handle = NodeHandle(client=source.client, host=source.host, rpc_port=SOURCE_PORT)
                return await run_suite(handle, launch_sinks, fixtures, config)
            finally:
                for runner in runners:
                    await runner.cleanup()

        report = run_async(run_test())

        assert report.passed, [str(result.verdict) for result in report.results]
        assert launched[0][BOOTNODE_PARAMETER] == source.enode
        assert sink.methods[:2] == ["engine_newPayloadV2", "engine_forkchoiceUpdatedV2"]
        assert {call.port for call in sink.calls[:2]} == {SINK_PORT + 6}
