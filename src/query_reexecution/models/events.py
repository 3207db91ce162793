"""
Failure events delivered to on-failure hooks.

A FailureEvent is created by the orchestrator the moment an execution
attempt terminates abnormally, and is consumed once, synchronously, by
every registered hook.
"""

from dataclasses import dataclass
from typing import Optional

from query_reexecution.models.enums import HookType


def error_message(error: BaseException) -> Optional[str]:
    """Return the error's message, or None when it has none."""
    if hasattr(error, "message"):
        return error.message
    text = str(error)
    return text or None


@dataclass(frozen=True)
class FailureEvent:
    """
    Immutable description of one attempt's failure.

    Attributes:
        hook_type: Lifecycle point (ON_FAILURE_HOOK for execution failures)
        error: The exception that ended the attempt
        attempt_number: 1-indexed attempt that failed
        query_id: Identifier of the query, if the session assigned one
        dag_id: Identifier of the failing DAG, when the error carries one
    """

    hook_type: HookType
    error: BaseException
    attempt_number: int
    query_id: Optional[str] = None
    dag_id: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        return error_message(self.error)

    @classmethod
    def from_error(
        cls,
        error: BaseException,
        attempt_number: int,
        query_id: Optional[str] = None,
    ) -> "FailureEvent":
        """Build an ON_FAILURE_HOOK event, lifting the DAG id off the error."""
        return cls(
            hook_type=HookType.ON_FAILURE_HOOK,
            error=error,
            attempt_number=attempt_number,
            query_id=query_id,
            dag_id=getattr(error, "dag_id", None),
        )
