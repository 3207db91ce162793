"""
Orchestrator exceptions.

Budget exhaustion has no exception of its own: the orchestrator re-raises
the error of the last attempt so the caller sees the real root cause.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from query_reexecution.orchestration.metadata import AttemptRecord


class QueryCancelledError(Exception):
    """
    Raised when the caller cancelled the query while a retry was pending.

    Chained (``raise ... from``) to the error of the last failed attempt,
    when there was one.

    Attributes:
        query_id: Identifier of the cancelled query
        attempts: Attempts made before cancellation
    """

    def __init__(self, query_id: str, attempts: tuple["AttemptRecord", ...]) -> None:
        self.query_id = query_id
        self.attempts = attempts
        super().__init__(f"Query {query_id} cancelled after {len(attempts)} attempt(s)")
