"""
Declarative failure signatures.

Each plugin keeps its signatures as a table of FailurePattern rows so new
signatures are added as data, without touching hook control flow. Tables are
evaluated in order; the error-kind filter of a row is checked before its
text matcher.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from query_reexecution.engine.exceptions import (
    DagRuntimeError,
    QueryExecutionError,
)
from query_reexecution.models.enums import MatcherType


@dataclass(frozen=True)
class FailurePattern:
    """
    One failure signature.

    Attributes:
        name: Short identifier used in logs
        matcher_type: REGEX (case sensitive full match, ``.`` spans newlines)
                      or SUBSTRING (literal containment)
        pattern: Regular expression or literal text
        error_kinds: Exception classes the error must be an instance of
    """

    name: str
    matcher_type: MatcherType
    pattern: str
    error_kinds: tuple[type[BaseException], ...]
    _compiled: Optional[re.Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.error_kinds:
            raise ValueError(f"pattern '{self.name}' must name at least one error kind")
        if self.matcher_type is MatcherType.REGEX:
            object.__setattr__(self, "_compiled", re.compile(self.pattern, re.DOTALL))

    def accepts(self, error: BaseException) -> bool:
        """Kind filter: is this error one the pattern applies to?"""
        return isinstance(error, self.error_kinds)

    def matches(self, message: str) -> bool:
        """Text matcher, applied to a message of an accepted error."""
        if self._compiled is not None:
            return self._compiled.fullmatch(message) is not None
        return self.pattern in message


def classify(
    error: BaseException,
    message: Optional[str],
    patterns: tuple[FailurePattern, ...],
) -> Optional[FailurePattern]:
    """
    Return the first pattern whose kind filter and matcher both accept.

    Args:
        error: Exception that ended the attempt
        message: Its message (None never matches)
        patterns: Table to evaluate, in order
    """
    if message is None:
        return None
    for pattern in patterns:
        if pattern.accepts(error) and pattern.matches(message):
            return pattern
    return None


# Lost AM containers exit with code -100 on node or container loss. This is
# what surfaces when the AM is managed by the server. Same language as
# ".*AM Container for .* exited .* exitCode: -100.*": the lookaheads pin the
# first "AM Container for " and the first " exited " after it, so a long
# diagnostic without the signature fails in one scan instead of backtracking.
LOST_AM_CONTAINER = FailurePattern(
    name="lost_am_container",
    matcher_type=MatcherType.REGEX,
    pattern=r"(?=(.*?AM Container for ))\1(?=(.*? exited ))\2.*? exitCode: -100.*",
    error_kinds=(DagRuntimeError,),
)

# Unmanaged AMs register in the discovery service; a vanished record means
# the AM died.
UNMANAGED_AM_FAILURE = FailurePattern(
    name="unmanaged_am_failure",
    matcher_type=MatcherType.SUBSTRING,
    pattern="AM record not found (likely died)",
    error_kinds=(DagRuntimeError,),
)

# AM lost track of the in-flight DAG during failover.
DAG_LOST_FAILURE = FailurePattern(
    name="dag_lost",
    matcher_type=MatcherType.SUBSTRING,
    pattern="No running DAG at present",
    error_kinds=(DagRuntimeError,),
)

LOST_AM_PATTERNS: tuple[FailurePattern, ...] = (
    LOST_AM_CONTAINER,
    UNMANAGED_AM_FAILURE,
    DAG_LOST_FAILURE,
)

VERTEX_FAILURE_PATTERNS: tuple[FailurePattern, ...] = (
    FailurePattern(
        name="vertex_failed",
        matcher_type=MatcherType.SUBSTRING,
        pattern="Vertex failed,",
        error_kinds=(QueryExecutionError,),
    ),
)

OUT_OF_MEMORY_PATTERNS: tuple[FailurePattern, ...] = (
    FailurePattern(
        name="java_oom",
        matcher_type=MatcherType.SUBSTRING,
        pattern="java.lang.OutOfMemoryError",
        error_kinds=(QueryExecutionError,),
    ),
    FailurePattern(
        name="hash_table_memory_limit",
        matcher_type=MatcherType.SUBSTRING,
        pattern="Hash table loading exceeded memory limits",
        error_kinds=(QueryExecutionError,),
    ),
)
