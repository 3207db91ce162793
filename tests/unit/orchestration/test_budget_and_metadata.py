"""
Unit tests for RetryBudget and the attempt metadata dataclasses.
"""

import pytest

from query_reexecution.models.enums import AttemptState
from query_reexecution.orchestration.budget import RetryBudget
from query_reexecution.orchestration.metadata import AttemptRecord, ReExecutionMetadata


# ============================================================================
# RetryBudget
# ============================================================================


def test_budget_counts_attempts():
    budget = RetryBudget(3)

    assert budget.consume() == 1
    assert budget.consume() == 2
    assert budget.remaining == 1
    assert not budget.exhausted

    assert budget.consume() == 3
    assert budget.exhausted
    assert budget.remaining == 0


def test_budget_refuses_beyond_maximum():
    budget = RetryBudget(1)
    budget.consume()

    with pytest.raises(RuntimeError):
        budget.consume()
    assert budget.attempts_made == 1


@pytest.mark.parametrize("max_attempts", [0, -1])
def test_budget_requires_at_least_one_attempt(max_attempts):
    with pytest.raises(ValueError):
        RetryBudget(max_attempts)


# ============================================================================
# Metadata
# ============================================================================


def failed(number: int, dag_id: str | None = None) -> AttemptRecord:
    return AttemptRecord(
        attempt_number=number,
        state=AttemptState.FAILED,
        latency_ms=10,
        error_type="DagRuntimeError",
        error_message="No running DAG at present",
        dag_id=dag_id,
    )


def succeeded(number: int) -> AttemptRecord:
    return AttemptRecord(attempt_number=number, state=AttemptState.SUCCEEDED, latency_ms=10)


def test_metadata_summarizes_history():
    metadata = ReExecutionMetadata(
        query_id="q1",
        attempts=(failed(1, "dag_1"), succeeded(2)),
        plugins=["reexecute_lost_am"],
        total_latency_ms=25,
    )

    assert metadata.total_attempts == 2
    assert metadata.succeeded is True
    assert metadata.dag_ids == ["dag_1"]


def test_metadata_requires_attempts():
    with pytest.raises(ValueError, match="attempts must not be empty"):
        ReExecutionMetadata(query_id="q1", attempts=(), plugins=[], total_latency_ms=0)


def test_metadata_requires_consecutive_numbers():
    with pytest.raises(ValueError, match="consecutive"):
        ReExecutionMetadata(query_id="q1", attempts=(failed(1), succeeded(3)), plugins=[], total_latency_ms=0)


def test_metadata_rejects_success_before_last_attempt():
    with pytest.raises(ValueError, match="only the last attempt"):
        ReExecutionMetadata(query_id="q1", attempts=(succeeded(1), failed(2)), plugins=[], total_latency_ms=0)


def test_attempt_record_validation():
    with pytest.raises(ValueError):
        AttemptRecord(attempt_number=0, state=AttemptState.FAILED, latency_ms=0)
    with pytest.raises(ValueError):
        AttemptRecord(attempt_number=1, state=AttemptState.FAILED, latency_ms=-1)
    assert failed(1).failed is True
