"""
Re-execution plugin protocol and per-plugin state holders.

A plugin observes failures through an on-failure hook and answers two
questions for the orchestrator: "should this query run again?" (after a
failed attempt) and "is it still worth it now that the plan is recompiled?"
(after compilation of the next attempt).

Plugins do not share state. Each one owns a RetryVote and, where useful, a
DagLineage. Both are lock protected because the host may deliver failure
events on a callback thread while the orchestrator polls from its own.
"""

import threading
from typing import Dict, Protocol

from query_reexecution.hooks.runner import HookRunner
from query_reexecution.models.enums import RetryState
from query_reexecution.models.plan import PlanSnapshot


class ReExecutionPlugin(Protocol):
    """
    Protocol for re-execution plugins.

    The vote methods are pure reads of state accumulated by the plugin's
    failure hook: calling them twice with no event in between returns the
    same answer. Neither the hook nor the vote methods may raise under
    normal operation; the orchestrator treats a raising plugin as abstaining.
    """

    name: str

    def initialize(self, hook_runner: HookRunner) -> None:
        """Register the plugin's failure hook with the session's hook runner."""
        ...

    def should_reexecute(self, execution_num: int) -> bool:
        """
        Vote after a failed attempt, before recompilation.

        Args:
            execution_num: 1-indexed number of the attempt that failed
        """
        ...

    def should_reexecute_after_compile(
        self,
        execution_num: int,
        old_plan: PlanSnapshot,
        new_plan: PlanSnapshot,
    ) -> bool:
        """
        Vote after the next attempt compiled, before it executes.

        Args:
            execution_num: 1-indexed number of the attempt that failed
            old_plan: Plan of the failed attempt (read-only)
            new_plan: Freshly compiled plan (read-only)
        """
        ...

    def prepare_to_reexecute(self) -> Dict[str, str]:
        """Settings overlay to apply to the next compilation ({} for none)."""
        ...


class RetryVote:
    """
    Sticky retry flag as an explicit UNDECIDED -> RETRY automaton.

    There is deliberately no reset(): one instance lives exactly as long as
    the query it belongs to.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = RetryState.UNDECIDED

    @property
    def state(self) -> RetryState:
        with self._lock:
            return self._state

    @property
    def retry_possible(self) -> bool:
        return self.state is RetryState.RETRY

    def mark_retry(self) -> bool:
        """Move to RETRY. Returns True only on the actual transition."""
        with self._lock:
            if self._state is RetryState.RETRY:
                return False
            self._state = RetryState.RETRY
            return True


class DagLineage:
    """
    Unique set of DAG ids a plugin has seen during one query.

    Diagnostic only: identifies which attempt a late failure refers to and
    shows up in logs. Never used to decide a vote.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dag_ids: set[str] = set()

    def add(self, dag_id: str) -> bool:
        """Record a DAG id. Returns False if it was already known."""
        with self._lock:
            if dag_id in self._dag_ids:
                return False
            self._dag_ids.add(dag_id)
            return True

    def snapshot(self) -> frozenset[str]:
        """Copy of the ids seen so far, safe to hand to another thread."""
        with self._lock:
            return frozenset(self._dag_ids)

    def __len__(self) -> int:
        with self._lock:
            return len(self._dag_ids)

    def __contains__(self, dag_id: object) -> bool:
        with self._lock:
            return dag_id in self._dag_ids
