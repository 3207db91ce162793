"""
Re-executes a query with a configured settings overlay after a vertex failure.
"""

from typing import Dict, Optional

import structlog

from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.enums import HookType
from query_reexecution.models.events import FailureEvent
from query_reexecution.models.plan import PlanSnapshot
from query_reexecution.plugins.base import RetryVote
from query_reexecution.plugins.patterns import VERTEX_FAILURE_PATTERNS, classify

logger = structlog.get_logger(__name__)


class ReExecutionOverlayPlugin:
    """
    Retry a failed vertex with different settings.

    The overlay (REEXEC_OVERLAY) is handed to the next compilation, e.g. to
    switch a join algorithm or raise container memory for the second run.
    """

    name = "overlay"

    def __init__(self, overlay: Optional[Dict[str, str]] = None):
        self.overlay = dict(overlay or {})
        self.vote = RetryVote()

    def initialize(self, hook_runner: HookRunner) -> None:
        hook_runner.add_on_failure_hook(self.on_failure)

    def on_failure(self, event: FailureEvent) -> None:
        if event.hook_type is not HookType.ON_FAILURE_HOOK:
            return

        matched = classify(event.error, event.message, VERTEX_FAILURE_PATTERNS)
        if matched is not None and self.vote.mark_retry():
            logger.info(
                "Vertex failure, re-execution with overlay possible",
                plugin=self.name,
                overlay_keys=sorted(self.overlay),
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
        if not self.vote.retry_possible:
            return {}
        return dict(self.overlay)
