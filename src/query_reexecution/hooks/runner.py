"""
Hook runner: delivers failure events to registered on-failure hooks.

One runner exists per query session. Hooks run synchronously, in
registration order, and a hook that raises is logged and skipped so it
cannot suppress another hook or abort the orchestrator.
"""

import threading
from typing import Callable

import structlog

from query_reexecution.models.events import FailureEvent
from query_reexecution.monitoring import metrics

logger = structlog.get_logger(__name__)

FailureHook = Callable[[FailureEvent], None]


def hook_name(hook: FailureHook) -> str:
    """Best-effort readable name for a hook (used for logs and metric labels)."""
    owner = getattr(hook, "__self__", None)
    if owner is not None:
        return getattr(owner, "name", type(owner).__name__)
    return getattr(hook, "__qualname__", type(hook).__name__)


class HookRunner:
    """
    Per-session hook dispatch adapter.

    Registration is thread safe; dispatch iterates over a snapshot of the
    hook list, so a hook registered while events are being delivered only
    sees later events.
    """

    def __init__(self, record_metrics: bool = True):
        self._lock = threading.Lock()
        self._on_failure_hooks: list[FailureHook] = []
        self.record_metrics = record_metrics

    def add_on_failure_hook(self, hook: FailureHook) -> None:
        """Register a hook to be called with every failure event."""
        with self._lock:
            self._on_failure_hooks.append(hook)
        logger.debug("On-failure hook registered", hook=hook_name(hook))

    @property
    def on_failure_hooks(self) -> tuple[FailureHook, ...]:
        with self._lock:
            return tuple(self._on_failure_hooks)

    def run_on_failure_hooks(self, event: FailureEvent) -> int:
        """
        Invoke every on-failure hook with the event.

        Args:
            event: Failure of the attempt that just ended

        Returns:
            Number of hooks that completed without raising
        """
        hooks = self.on_failure_hooks
        completed = 0

        logger.info(
            "Running on-failure hooks",
            hooks_count=len(hooks),
            attempt=event.attempt_number,
            error_type=type(event.error).__name__,
        )

        for hook in hooks:
            try:
                hook(event)
                completed += 1
            except Exception:
                name = hook_name(hook)
                logger.exception("On-failure hook raised, skipping", hook=name)
                if self.record_metrics:
                    metrics.reexec_plugin_faults_total.labels(plugin=name, stage="on_failure").inc()

        return completed
