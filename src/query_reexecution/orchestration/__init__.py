"""
Re-execution orchestration.

Main Components:
    - ReExecutionOrchestrator: control loop for one query
    - RetryBudget: attempts made vs REEXEC_MAX_ATTEMPTS
    - ReExecutionMetadata / AttemptRecord: attempt history
    - QueryCancelledError: raised when the caller cancels

Usage:
    >>> from query_reexecution.orchestration import ReExecutionOrchestrator
    >>> orchestrator = ReExecutionOrchestrator(driver, settings)
    >>> outcome = await orchestrator.run(query)
"""

from query_reexecution.orchestration.budget import RetryBudget
from query_reexecution.orchestration.exceptions import QueryCancelledError
from query_reexecution.orchestration.metadata import (
    AttemptRecord,
    ReExecutionMetadata,
    ReExecutionResult,
)
from query_reexecution.orchestration.orchestrator import ReExecutionOrchestrator

__all__ = [
    "ReExecutionOrchestrator",
    "RetryBudget",
    "AttemptRecord",
    "ReExecutionMetadata",
    "ReExecutionResult",
    "QueryCancelledError",
]
