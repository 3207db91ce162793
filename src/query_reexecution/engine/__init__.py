"""
Boundary to the query engine: the driver interface and the errors it raises.
"""

from query_reexecution.engine.base_driver import BaseQueryDriver
from query_reexecution.engine.exceptions import (
    DagRuntimeError,
    DagSubmissionError,
    QueryCompileError,
    QueryError,
    QueryExecutionError,
)

__all__ = [
    "BaseQueryDriver",
    "QueryError",
    "QueryCompileError",
    "QueryExecutionError",
    "DagRuntimeError",
    "DagSubmissionError",
]
