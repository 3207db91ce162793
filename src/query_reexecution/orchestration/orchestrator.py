"""
Re-execution orchestrator: runs one query, re-submitting it after failures
that the plugins classify as transient infrastructure faults.

State machine per attempt:
    COMPILING -> EXECUTING -> SUCCEEDED | FAILED

After a FAILED attempt:
    1. Budget exhausted      -> raise the attempt's own error
    2. Dispatch FailureEvent -> every plugin's on-failure hook runs to completion
    3. OR-poll should_reexecute; nobody votes retry -> raise the error
    4. Merge plugin overlays and recompile (compile errors surface as-is)
    5. OR-poll should_reexecute_after_compile(old, new); false -> raise the error
    6. Execute the new plan

Usage:
    orchestrator = ReExecutionOrchestrator(driver)  # or (driver, Settings(...))
    outcome = await orchestrator.run("SELECT ...")
"""

import threading
import time
import uuid
from typing import Callable, Dict, NoReturn, Optional

import structlog

from query_reexecution.config import Settings
from query_reexecution.config import settings as default_settings
from query_reexecution.engine.base_driver import BaseQueryDriver
from query_reexecution.engine.exceptions import QueryError
from query_reexecution.hooks.runner import HookRunner
from query_reexecution.logging_config import bind_query_context, clear_query_context
from query_reexecution.models.enums import AttemptState, QueryState
from query_reexecution.models.events import FailureEvent, error_message
from query_reexecution.models.plan import PlanSnapshot
from query_reexecution.monitoring import metrics
from query_reexecution.orchestration.budget import RetryBudget
from query_reexecution.orchestration.exceptions import QueryCancelledError
from query_reexecution.orchestration.metadata import (
    AttemptRecord,
    ReExecutionMetadata,
    ReExecutionResult,
)
from query_reexecution.plugins.base import ReExecutionPlugin
from query_reexecution.plugins.registry import PluginRegistry

logger = structlog.get_logger(__name__)

Vote = Callable[[ReExecutionPlugin], bool]


class ReExecutionOrchestrator:
    """
    Control loop for one query.

    Votes are OR-aggregated: a single plugin voting retry is enough, because
    giving up on a transient fault costs the user a failed query while an
    extra attempt costs at most one run, bounded by the budget.

    Attributes:
        driver: Engine driver used to compile and execute
        settings: Application settings
        query_id: Identifier used in logs and failure events
        hook_runner: Session hook runner the plugins registered with
        plugins: Ordered plugins active for this query
        budget: Retry budget (REEXEC_MAX_ATTEMPTS, or 1 when disabled)
        state: Current QueryState
    """

    def __init__(
        self,
        driver: BaseQueryDriver,
        settings: Optional[Settings] = None,
        plugins: Optional[list[ReExecutionPlugin]] = None,
        query_id: Optional[str] = None,
    ):
        """
        Initialize the orchestrator and wire plugins into the hook runner.

        Args:
            driver: Engine driver
            settings: Application settings (the process-wide instance when omitted)
            plugins: Plugin instances to use instead of REEXEC_STRATEGIES
            query_id: Query identifier (generated when omitted)

        Raises:
            UnknownPluginError: REEXEC_STRATEGIES names an unregistered plugin
            ValueError: REEXEC_MAX_ATTEMPTS < 1
        """
        self.driver = driver
        if settings is None:
            settings = default_settings
        self.settings = settings
        self.query_id = query_id or uuid.uuid4().hex
        self.hook_runner = HookRunner(record_metrics=settings.PROMETHEUS_ENABLED)

        if plugins is not None:
            self.plugins = PluginRegistry(plugins)
        else:
            self.plugins = PluginRegistry.from_settings(settings)

        max_attempts = settings.REEXEC_MAX_ATTEMPTS if settings.REEXEC_ENABLED else 1
        self.budget = RetryBudget(max_attempts)

        self.state = QueryState.COMPILING
        self._attempts: list[AttemptRecord] = []
        self._overlay: Dict[str, str] = {}
        self._cancelled = threading.Event()
        self._started = False

        self.plugins.attach(self.hook_runner)

        logger.info(
            "ReExecutionOrchestrator initialized",
            query_id=self.query_id,
            driver=getattr(driver, "name", type(driver).__name__),
            plugins=self.plugins.names,
            max_attempts=self.budget.max_attempts,
        )

    @property
    def attempts(self) -> tuple[AttemptRecord, ...]:
        return tuple(self._attempts)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """
        Cancel the query. Safe to call from any thread.

        No new attempt is started and no further votes are polled once the
        current step returns; hooks already running are left to finish.
        """
        self._cancelled.set()
        logger.info("Query cancellation requested", query_id=self.query_id, state=self.state.value)

    async def run(self, query: str) -> ReExecutionResult:
        """
        Run the query, re-executing it while plugins and budget allow.

        Args:
            query: Query text

        Returns:
            ReExecutionResult with the engine result and attempt history

        Raises:
            QueryError: The error that ended the last attempt (or a compile error)
            QueryCancelledError: cancel() was called before the query finished
        """
        if self._started:
            raise RuntimeError("An orchestrator runs exactly one query; create a new one")
        self._started = True

        bind_query_context(self.query_id)
        try:
            return await self._run(query)
        finally:
            clear_query_context()

    async def _run(self, query: str) -> ReExecutionResult:
        started = time.monotonic()

        self._check_cancelled(None)
        plan = await self._compile(query)

        while True:
            self._check_cancelled(None)
            attempt = self.budget.consume()
            bind_query_context(self.query_id, attempt)
            self._transition(QueryState.EXECUTING)

            attempt_start = time.monotonic()
            try:
                result = await self.driver.execute(plan)
            except QueryError as e:
                self._record_attempt(attempt, AttemptState.FAILED, attempt_start, plan, error=e)
                logger.warning(
                    f"Attempt {attempt} failed",
                    attempt=attempt,
                    error_type=type(e).__name__,
                    error_message=error_message(e),
                    remaining_attempts=self.budget.remaining,
                )
                plan = await self._prepare_next_attempt(query, plan, attempt, e)
                continue

            self._record_attempt(attempt, AttemptState.SUCCEEDED, attempt_start, plan)
            self._transition(QueryState.SUCCEEDED)

            metadata = self._build_metadata(started)
            self._count(
                metrics.reexec_queries_total,
                outcome="succeeded" if attempt == 1 else "succeeded_after_retry",
            )
            logger.info(
                "Query succeeded",
                total_attempts=metadata.total_attempts,
                total_latency_ms=metadata.total_latency_ms,
            )
            return ReExecutionResult(result=result, metadata=metadata)

    async def _prepare_next_attempt(
        self,
        query: str,
        plan: PlanSnapshot,
        attempt: int,
        error: QueryError,
    ) -> PlanSnapshot:
        """Decide on and compile the next attempt, or raise ``error``."""
        self._transition(QueryState.FAILED)

        if self.budget.exhausted:
            logger.error(
                "Retry budget exhausted, surfacing last error",
                total_attempts=self.budget.attempts_made,
                max_attempts=self.budget.max_attempts,
                error_type=type(error).__name__,
            )
            self._give_up(error, outcome="budget_exhausted")

        self.hook_runner.run_on_failure_hooks(
            FailureEvent.from_error(error, attempt_number=attempt, query_id=self.query_id)
        )

        self._check_cancelled(error)
        if not self._poll("after_failure", lambda plugin: plugin.should_reexecute(attempt)):
            logger.info("No plugin voted for re-execution", error_type=type(error).__name__)
            self._give_up(error, outcome="failed")

        self._overlay.update(self._collect_overlays())
        self._check_cancelled(error)
        new_plan = await self._compile(query)

        self._check_cancelled(error)
        if not self._poll(
            "after_compile",
            lambda plugin: plugin.should_reexecute_after_compile(attempt, plan, new_plan),
        ):
            logger.info(
                "Re-execution withdrawn after recompilation",
                plan_did_change=not plan.same_shape(new_plan),
            )
            self._give_up(error, outcome="failed")

        logger.info(
            "Re-executing query",
            next_attempt=attempt + 1,
            overlay_keys=sorted(self._overlay),
        )
        return new_plan

    async def _compile(self, query: str) -> PlanSnapshot:
        self._transition(QueryState.COMPILING)
        try:
            return await self.driver.compile(query, dict(self._overlay))
        except QueryError as e:
            logger.warning(
                "Query compilation failed",
                error_type=type(e).__name__,
                error_message=error_message(e),
            )
            self._transition(QueryState.FAILED)
            self._count(metrics.reexec_queries_total, outcome="failed")
            raise

    def _poll(self, stage: str, vote: Vote) -> bool:
        """OR-aggregate one vote across all plugins; a raising plugin abstains."""
        # Plugins may share a name, so votes are kept in order, not keyed
        votes: list[tuple[str, bool]] = []
        aggregate = False
        for plugin in self.plugins:
            try:
                decision = bool(vote(plugin))
            except Exception:
                logger.exception("Plugin vote raised, counting as abstention", plugin=plugin.name, stage=stage)
                self._count(metrics.reexec_plugin_faults_total, plugin=plugin.name, stage=stage)
                decision = False
            votes.append((plugin.name, decision))
            aggregate = aggregate or decision
            self._count(
                metrics.reexec_votes_total,
                plugin=plugin.name,
                stage=stage,
                vote=str(decision).lower(),
            )

        logger.info("Re-execution votes collected", stage=stage, votes=votes, reexecute=aggregate)
        return aggregate

    def _collect_overlays(self) -> Dict[str, str]:
        overlay: Dict[str, str] = {}
        for plugin in self.plugins:
            try:
                overlay.update(plugin.prepare_to_reexecute())
            except Exception:
                logger.exception("Plugin failed to prepare re-execution, skipping", plugin=plugin.name)
                self._count(metrics.reexec_plugin_faults_total, plugin=plugin.name, stage="prepare")
        return overlay

    def _check_cancelled(self, last_error: Optional[BaseException]) -> None:
        if not self._cancelled.is_set():
            return
        self._transition(QueryState.CANCELLED)
        self._count(metrics.reexec_queries_total, outcome="cancelled")
        raise QueryCancelledError(self.query_id, self.attempts) from last_error

    def _give_up(self, error: QueryError, outcome: str) -> NoReturn:
        self._transition(QueryState.FAILED)
        self._count(metrics.reexec_queries_total, outcome=outcome)
        raise error

    def _record_attempt(
        self,
        attempt: int,
        state: AttemptState,
        started: float,
        plan: PlanSnapshot,
        error: Optional[BaseException] = None,
    ) -> None:
        record = AttemptRecord(
            attempt_number=attempt,
            state=state,
            latency_ms=int((time.monotonic() - started) * 1000),
            error_type=type(error).__name__ if error else None,
            error_message=error_message(error) if error else None,
            dag_id=getattr(error, "dag_id", None),
            settings=dict(plan.settings),
        )
        self._attempts.append(record)
        self._count(metrics.reexec_attempts_total, outcome=state.value)

    def _build_metadata(self, started: float) -> ReExecutionMetadata:
        return ReExecutionMetadata(
            query_id=self.query_id,
            attempts=self.attempts,
            plugins=self.plugins.names,
            total_latency_ms=int((time.monotonic() - started) * 1000),
        )

    def _transition(self, state: QueryState) -> None:
        if state is not self.state:
            logger.debug("Query state transition", from_state=self.state.value, to_state=state.value)
        self.state = state

    def _count(self, counter, **labels: str) -> None:
        if self.settings.PROMETHEUS_ENABLED:
            counter.labels(**labels).inc()
