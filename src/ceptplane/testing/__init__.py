"""Codeception test tree, runs and result reconciliation."""

from ceptplane.testing.models import (
    NodeKind,
    NodeState,
    RunResult,
    RunScope,
    TestCaseRecord,
    TestNode,
)
from ceptplane.testing.ops import CodeceptionController
from ceptplane.testing.sink import ConsoleSink, TestSink
from ceptplane.testing.tree import TestTree

__all__ = [
    "CodeceptionController",
    "ConsoleSink",
    "NodeKind",
    "NodeState",
    "RunResult",
    "RunScope",
    "TestCaseRecord",
    "TestNode",
    "TestSink",
    "TestTree",
]
