"""
Enumerations shared by the hook runner, the plugins and the orchestrator.
"""

from enum import Enum


class HookType(str, Enum):
    """
    Lifecycle points at which the session invokes registered hooks.

    Only ON_FAILURE_HOOK is consumed by the re-execution plugins.
    """

    PRE_EXEC_HOOK = "pre_exec"
    POST_EXEC_HOOK = "post_exec"
    ON_FAILURE_HOOK = "on_failure"


class QueryState(str, Enum):
    """Orchestrator state for one query."""

    COMPILING = "compiling"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class AttemptState(str, Enum):
    """Outcome of a single execution attempt."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RetryState(str, Enum):
    """
    Per-plugin retry vote.

    Two-state automaton: UNDECIDED -> RETRY, with no transition back.
    """

    UNDECIDED = "undecided"
    RETRY = "retry"


class MatcherType(str, Enum):
    """How a failure pattern is tested against an error message."""

    REGEX = "regex"  # full match, DOTALL
    SUBSTRING = "substring"
