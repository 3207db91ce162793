"""
Re-executes a query whose DAG never reached the runtime.

Submission failures (session went away between acquisition and submit,
submission timed out) leave no work behind, so another attempt is safe.
"""

from typing import Dict, Iterator

import structlog

from query_reexecution.engine.exceptions import DagSubmissionError
from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.enums import HookType
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot
from query_reexecution.plugins.base import RetryVote

logger = structlog.get_logger(__name__)


def iter_error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error and its causes/contexts, stopping at cycles."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


class ReExecutionDagSubmitPlugin:
    """Votes for re-execution when a DagSubmissionError is anywhere in the chain."""

    name = "dagsubmit"

    def __init__(self) -> None:
        self.vote = RetryVote()

    def initialize(self, hook_runner: HookRunner) -> None:
        hook_runner.add_on_failure_hook(self.on_failure)

    def on_failure(self, event: FailureEvent) -> None:
        if event.hook_type is not HookType.ON_FAILURE_HOOK:
            return

        for cause in iter_error_chain(event.error):
            if isinstance(cause, DagSubmissionError):
                self.vote.mark_retry()
                logger.info(
                    "DAG submission failed, re-execution possible",
                    plugin=self.name,
                    cause=str(cause),
                )
                return

    def should_reexecute(self, execution_num: int) -> bool:
        return self.vote.retry_possible

    def should_reexecute_after_compile(
        self,
        execution_num: int,
        old_plan: PlanSnapshot,
        new_plan: PlanSnapshot,
    ) -> bool:
        return self.vote.retry_possible

    def prepare_to_reexecute(self) -> Dict[str, str]:
        return {}
