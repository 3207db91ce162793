"""
Abstract base driver for the query engine.

Defines the two calls the orchestrator makes into the engine. The compiler,
optimizer and physical execution live behind this interface; this package
never looks inside a plan beyond its PlanSnapshot.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

import structlog

from query_reexecution.models.plan import PlanSnapshot


logger = structlog.get_logger(__name__)


class BaseQueryDriver(ABC):
    """
    Abstract base class for query engine drivers.

    Responsibilities:
    - Compile a query text into a plan, honoring a settings overlay
    - Execute a compiled plan and return its result

    Does NOT handle:
    - Deciding whether a failed query is worth another attempt
      (that's ReExecutionOrchestrator's job)
    - Running failure hooks (the orchestrator dispatches them)
    """

    def __init__(self, name: str | None = None):
        """
        Initialize base driver.

        Args:
            name: Driver name used in logs (defaults to the class name)
        """
        self.name = name or self.__class__.__name__

        logger.debug("Initialized query driver", driver=self.name)

    @abstractmethod
    async def compile(self, query: str, overlay: Dict[str, str]) -> PlanSnapshot:
        """
        Compile the query into an executable plan.

        Args:
            query: Query text
            overlay: Settings to apply on top of the session configuration
                     for this compilation only (empty on the first attempt)

        Returns:
            PlanSnapshot of the compiled plan

        Raises:
            QueryCompileError: Parse, semantic or planning failure
        """
        pass

    @abstractmethod
    async def execute(self, plan: PlanSnapshot) -> Any:
        """
        Execute a compiled plan.

        Args:
            plan: Snapshot returned by compile()

        Returns:
            Engine-specific query result

        Raises:
            QueryExecutionError: Execution failed (DagRuntimeError when the
                                 distributed runtime reports the failure)
        """
        pass
