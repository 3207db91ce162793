"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from query_reexecution.config import Settings
from query_reexecution.engine.exceptions import DagRuntimeError, QueryError
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot


LOST_AM_MESSAGE = "AM Container for appattempt_1 exited with exitCode: -100"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.REEXEC_MAX_ATTEMPTS = 5
    """
    return Settings(
        # === Logging ===
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Re-Execution ===
        REEXEC_ENABLED=True,
        REEXEC_STRATEGIES=["overlay", "reoptimize", "reexecute_lost_am", "dagsubmit"],
        REEXEC_MAX_ATTEMPTS=2,
        REEXEC_OVERLAY={},
        REOPTIMIZE_OVERLAY={"runtime_stats.enabled": "true"},

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Enable explicitly in metric tests
    )


@pytest.fixture
def create_failure_event():
    """Factory fixture to create an ON_FAILURE_HOOK FailureEvent for an error.

    Usage:
        def test_something(create_failure_event):
            event = create_failure_event(DagRuntimeError("boom", dag_id="dag_1"))
    """
    def _create(error: BaseException, attempt_number: int = 1, query_id: str = "query_test") -> FailureEvent:
        return FailureEvent.from_error(error, attempt_number=attempt_number, query_id=query_id)

    return _create


@pytest.fixture
def create_runtime_error():
    """Factory fixture to create DagRuntimeError with custom message and DAG id."""
    def _create(message: str | None = LOST_AM_MESSAGE, dag_id: str | None = "dag_1_1") -> QueryError:
        return DagRuntimeError(message, dag_id=dag_id)

    return _create


@pytest.fixture
def create_plan():
    """Factory fixture to create PlanSnapshot instances.

    Usage:
        def test_something(create_plan):
            plan = create_plan(fingerprint="plan-b")
    """
    def _create(fingerprint: str = "plan-a", settings: dict[str, str] | None = None) -> PlanSnapshot:
        return PlanSnapshot(
            query_id="query_test",
            fingerprint=fingerprint,
            settings=settings or {},
        )

    return _create
