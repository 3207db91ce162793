"""Unit test fixtures (mocks and stubs).

Provides mock drivers and scriptable plugins for testing the orchestrator
without a query engine.
"""

from typing import Dict
from unittest.mock import AsyncMock

import pytest

from query_reexecution.engine.base_driver import BaseQueryDriver
from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot


class StubPlugin:
    """Plugin with scripted votes that records every call it receives."""

    def __init__(
        self,
        name: str = "stub",
        vote: bool = False,
        after_compile_vote: bool | None = None,
        overlay: Dict[str, str] | None = None,
    ):
        self.name = name
        self.vote = vote
        self.after_compile_vote = vote if after_compile_vote is None else after_compile_vote
        self.overlay = overlay or {}
        self.events: list[FailureEvent] = []
        self.calls: list[str] = []

    def initialize(self, hook_runner: HookRunner) -> None:
        hook_runner.add_on_failure_hook(self.on_failure)

    def on_failure(self, event: FailureEvent) -> None:
        self.calls.append("on_failure")
        self.events.append(event)

    def should_reexecute(self, execution_num: int) -> bool:
        self.calls.append("should_reexecute")
        return self.vote

    def should_reexecute_after_compile(
        self, execution_num: int, old_plan: PlanSnapshot, new_plan: PlanSnapshot
    ) -> bool:
        self.calls.append("should_reexecute_after_compile")
        return self.after_compile_vote

    def prepare_to_reexecute(self) -> Dict[str, str]:
        self.calls.append("prepare_to_reexecute")
        return dict(self.overlay)


class ExplodingPlugin(StubPlugin):
    """Plugin whose hook and vote methods all raise."""

    def on_failure(self, event: FailureEvent) -> None:
        raise RuntimeError("hook bug")

    def should_reexecute(self, execution_num: int) -> bool:
        raise RuntimeError("vote bug")

    def should_reexecute_after_compile(self, execution_num, old_plan, new_plan) -> bool:
        raise RuntimeError("vote bug")

    def prepare_to_reexecute(self) -> Dict[str, str]:
        raise RuntimeError("prepare bug")


@pytest.fixture
def stub_plugin():
    """Factory fixture for StubPlugin."""
    return StubPlugin


@pytest.fixture
def exploding_plugin():
    """Factory fixture for ExplodingPlugin."""
    return ExplodingPlugin


@pytest.fixture
def mock_driver(create_plan):
    """Mock BaseQueryDriver: compile returns plan-a, execute returns rows."""
    mock = AsyncMock(spec=BaseQueryDriver)
    mock.name = "mock_driver"
    mock.compile = AsyncMock(return_value=create_plan())
    mock.execute = AsyncMock(return_value=[("row",)])
    return mock
