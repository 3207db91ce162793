"""
Re-execution metadata tracking.

AttemptRecord captures one execution attempt; ReExecutionMetadata captures
the whole history of a query for logs and audit. Failed attempts are
recorded, never replayed: partial output and DAG ids of a failed attempt are
kept only so operators can correlate them with runtime logs.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from query_reexecution.models.enums import AttemptState


@dataclass(frozen=True)
class AttemptRecord:
    """
    One execution attempt.

    Attributes:
        attempt_number: 1-indexed attempt number
        state: SUCCEEDED or FAILED
        latency_ms: Wall time of the execute call (ms)
        error_type: Exception class name for failed attempts
        error_message: Exception message for failed attempts
        dag_id: DAG id reported by the runtime, if any
        settings: Overlay the attempt's plan was compiled with
    """

    attempt_number: int
    state: AttemptState
    latency_ms: int
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    dag_id: Optional[str] = None
    settings: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.attempt_number < 1:
            raise ValueError("attempt_number must be >= 1")
        if self.latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")

    @property
    def failed(self) -> bool:
        return self.state is AttemptState.FAILED


@dataclass(frozen=True)
class ReExecutionMetadata:
    """
    Complete attempt history of a query.

    Attributes:
        query_id: Identifier of the query
        attempts: Every execution attempt, in order
        plugins: Names of the plugins that were active
        total_latency_ms: Time from first compile to final outcome (ms)
    """

    query_id: str
    attempts: tuple[AttemptRecord, ...]
    plugins: list[str]
    total_latency_ms: int

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if not self.attempts:
            raise ValueError("attempts must not be empty")

        numbers = [attempt.attempt_number for attempt in self.attempts]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(f"attempt numbers must be consecutive from 1, got {numbers}")

        if any(attempt.state is AttemptState.SUCCEEDED for attempt in self.attempts[:-1]):
            raise ValueError("only the last attempt may have succeeded")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

    @property
    def total_attempts(self) -> int:
        return len(self.attempts)

    @property
    def succeeded(self) -> bool:
        return self.attempts[-1].state is AttemptState.SUCCEEDED

    @property
    def dag_ids(self) -> list[str]:
        return [attempt.dag_id for attempt in self.attempts if attempt.dag_id]


@dataclass(frozen=True)
class ReExecutionResult:
    """Successful query result together with its attempt history."""

    result: Any
    metadata: ReExecutionMetadata
