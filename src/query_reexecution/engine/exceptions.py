"""
Errors raised by the query engine (compiler and execution backend).

The orchestrator only classifies failures that derive from QueryError;
anything else is treated as a bug in the caller and propagates untouched.
Re-execution plugins filter on these classes before looking at message text.
"""

from typing import Any


class QueryError(Exception):
    """
    Base exception for all engine-side query failures.

    The message is optional: some backend failures arrive without one, and
    plugins must cope with that.
    """

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize query error.

        Args:
            message: Human-readable error description (may be None)
            details: Structured error data for logging/metrics
        """
        super().__init__(message or "")
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message or ""


class QueryCompileError(QueryError):
    """
    Compilation failed (parse, semantic analysis, planning).

    Examples: unknown table, type mismatch, unsupported construct.
    Never a candidate for re-execution by the bundled plugins.
    """
    pass


class QueryExecutionError(QueryError):
    """
    Raised when a compiled plan fails while running.

    Covers task failures reported by the engine that are not attributed
    to the distributed execution runtime itself.
    """
    pass


class DagRuntimeError(QueryExecutionError):
    """
    Failure reported by the distributed execution runtime for one DAG.

    Carries the identifier of the DAG that was running when the failure
    happened, when the runtime knows it.
    """

    def __init__(
        self,
        message: str | None = None,
        dag_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize DAG runtime error.

        Args:
            message: Error text as reported by the application master
            dag_id: Identifier of the failing DAG (None if not yet assigned)
            details: Structured error data for logging/metrics
        """
        super().__init__(message, details)
        self.dag_id = dag_id


class DagSubmissionError(QueryExecutionError):
    """
    The DAG could not be submitted to the runtime session.

    Typically wrapped by the driver as the cause of a broader execution
    error; plugins inspect the whole cause chain.
    """
    pass
