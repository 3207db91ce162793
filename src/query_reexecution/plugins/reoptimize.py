"""
Re-optimizes a query that ran out of memory.

The next compilation collects runtime statistics from the failed run, which
lets the planner pick a different shape. If recompilation produced the same
plan, the failure will repeat, so the plugin withdraws its support in the
after-compile poll.
"""

from typing import Dict, Optional

import structlog

from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.enums import HookType
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot
from query_reexecution.plugins.base import RetryVote
from query_reexecution.plugins.patterns import OUT_OF_MEMORY_PATTERNS, classify

logger = structlog.get_logger(__name__)


class ReOptimizePlugin:
    """Votes for re-execution after memory exhaustion, if the plan changes."""

    name = "reoptimize"

    def __init__(self, overlay: Optional[Dict[str, str]] = None):
        self.overlay = dict(overlay or {})
        self.vote = RetryVote()

    def initialize(self, hook_runner: HookRunner) -> None:
        hook_runner.add_on_failure_hook(self.on_failure)

    def on_failure(self, event: FailureEvent) -> None:
        if event.hook_type is not HookType.ON_FAILURE_HOOK:
            return

        matched = classify(event.error, event.message, OUT_OF_MEMORY_PATTERNS)
        if matched is not None:
            self.vote.mark_retry()
            logger.info(
                "Memory exhaustion detected, query may be re-optimized",
                plugin=self.name,
                matched_pattern=matched.name,
            )

    def should_reexecute(self, execution_num: int) -> bool:
        return self.vote.retry_possible

    def should_reexecute_after_compile(
        self,
        execution_num: int,
        old_plan: PlanSnapshot,
        new_plan: PlanSnapshot,
    ) -> bool:
        if not self.vote.retry_possible:
            return False
        plan_did_change = not old_plan.same_shape(new_plan)
        logger.info(
            "Re-optimized plan compared",
            plugin=self.name,
            plan_did_change=plan_did_change,
            old_fingerprint=old_plan.fingerprint,
            new_fingerprint=new_plan.fingerprint,
        )
        return plan_did_change

    def prepare_to_reexecute(self) -> Dict[str, str]:
        if not self.vote.retry_possible:
            return {}
        return dict(self.overlay)
