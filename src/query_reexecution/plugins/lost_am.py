"""
Re-executes a query when the DAG runtime's application master was lost.

Node or container loss, an AM that disappeared from the discovery service,
and an AM that no longer knows about the running DAG are infrastructure
faults: the same query is expected to succeed on a fresh AM.
"""

from typing import Dict

import structlog

from query_reexecution.engine.exceptions import DagRuntimeError
from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.enums import HookType
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot
from query_reexecution.plugins.base import DagLineage, RetryVote
from query_reexecution.plugins.patterns import LOST_AM_PATTERNS, FailurePattern, classify

logger = structlog.get_logger(__name__)


class ReExecuteLostAMPlugin:
    """
    Votes for re-execution after a lost application master.

    Only DagRuntimeError failures are considered; compile and semantic errors
    never change the vote even if their text looks like an AM failure. DAG ids
    of every runtime failure are kept for diagnostics.
    """

    name = "reexecute_lost_am"

    def __init__(self, patterns: tuple[FailurePattern, ...] = LOST_AM_PATTERNS):
        self.patterns = patterns
        self.vote = RetryVote()
        self.dag_ids = DagLineage()

    @property
    def retry_possible(self) -> bool:
        return self.vote.retry_possible

    def initialize(self, hook_runner: HookRunner) -> None:
        hook_runner.add_on_failure_hook(self.on_failure)

    def on_failure(self, event: FailureEvent) -> None:
        if event.hook_type is not HookType.ON_FAILURE_HOOK:
            return

        error = event.error
        if not isinstance(error, DagRuntimeError):
            logger.info(
                "Failure is not a DAG runtime error, ignoring",
                plugin=self.name,
                error_type=type(error).__name__,
            )
            return

        if error.dag_id is not None:
            self.dag_ids.add(error.dag_id)

        message = error.message
        if message is None:
            return

        matched = classify(error, message, self.patterns)
        if matched is not None:
            self.vote.mark_retry()

        logger.info(
            "Got DAG runtime failure",
            plugin=self.name,
            error_message=message,
            matched_pattern=matched.name if matched else None,
            retry_possible=self.vote.retry_possible,
            dags_seen=sorted(self.dag_ids.snapshot()),
        )

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
