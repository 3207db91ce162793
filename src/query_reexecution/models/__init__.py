"""
Data models shared across the re-execution subsystem.

Includes:
- Enums (HookType, QueryState, AttemptState, RetryState, MatcherType)
- FailureEvent (frozen dataclass delivered to on-failure hooks)
- PlanSnapshot (frozen pydantic model handed to plugins between attempts)
"""

from query_reexecution.models.enums import (
    AttemptState,
    HookType,
    MatcherType,
    QueryState,
    RetryState,
)
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot

__all__ = [
    # Enums
    "AttemptState",
    "HookType",
    "MatcherType",
    "QueryState",
    "RetryState",
    # Events
    "FailureEvent",
    # Plans
    "PlanSnapshot",
]
