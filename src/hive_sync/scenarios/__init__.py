"""Scenario entry points: source verification, sink sync, and the whole suite."""

from .sink import BOOTNODE_PARAMETER, run_sync_test, sink_parameters
from .source import run_source_test
from .suite import (
    SINK_FILES,
    SOURCE_FILES,
    SUITE_DESCRIPTION,
    SUITE_NAME,
    ScenarioResult,
    SinkLauncher,
    SuiteReport,
    run_suite,
    run_sync_tests,
    source_test_name,
    sync_test_name,
)
from .verdict import Verdict, VerdictKind

__all__ = [
    "BOOTNODE_PARAMETER",
    "SINK_FILES",
    "SOURCE_FILES",
    "SUITE_DESCRIPTION",
    "SUITE_NAME",
    "ScenarioResult",
    "SinkLauncher",
    "SuiteReport",
    "Verdict",
    "VerdictKind",
    "run_source_test",
    "run_suite",
    "run_sync_test",
    "run_sync_tests",
    "sink_parameters",
    "source_test_name",
    "sync_test_name",
]
