"""
Plugin registry: maps strategy names to plugin factories and builds the
ordered plugin list for one query.
"""

from collections.abc import Callable, Iterator

import structlog

from query_reexecution.config import Settings
from query_reexecution.hooks.runner import HookRunner
from query_reexecution.plugins.base import ReExecutionPlugin
from query_reexecution.plugins.dag_submit import ReExecutionDagSubmitPlugin
from query_reexecution.plugins.exceptions import UnknownPluginError
from query_reexecution.plugins.lost_am import ReExecuteLostAMPlugin
from query_reexecution.plugins.overlay import ReExecutionOverlayPlugin
from query_reexecution.plugins.reoptimize import ReOptimizePlugin

logger = structlog.get_logger(__name__)

PluginFactory = Callable[[Settings], ReExecutionPlugin]


# Registry mapping strategy names to plugin factories
_REGISTRY: dict[str, PluginFactory] = {}


def register_plugin(name: str, factory: PluginFactory) -> None:
    """
    Register a plugin factory.

    Args:
        name: Strategy name as used in REEXEC_STRATEGIES
        factory: Callable building a fresh plugin instance from settings
    """
    _REGISTRY[name] = factory


def get_plugin_factory(name: str) -> PluginFactory:
    """
    Get the plugin factory for a strategy name.

    Raises:
        UnknownPluginError: If no factory is registered under that name
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownPluginError(name, registered_plugins()) from None


def registered_plugins() -> list[str]:
    return sorted(_REGISTRY)


class PluginRegistry:
    """
    Ordered plugins active for one query.

    Plugins are created fresh per query and never shared: their votes and
    DAG lineage belong to the query they were built for.
    """

    def __init__(self, plugins: list[ReExecutionPlugin] | None = None):
        self._plugins: list[ReExecutionPlugin] = list(plugins or [])

    @classmethod
    def from_settings(cls, settings: Settings) -> "PluginRegistry":
        """Instantiate the plugins named by REEXEC_STRATEGIES, in order."""
        if not settings.REEXEC_ENABLED:
            return cls()
        return cls([get_plugin_factory(name)(settings) for name in settings.REEXEC_STRATEGIES])

    def attach(self, hook_runner: HookRunner) -> None:
        """Register every plugin's failure hook with the session's hook runner."""
        for plugin in self._plugins:
            plugin.initialize(hook_runner)
        logger.info("Re-execution plugins initialized", plugins=self.names)

    @property
    def names(self) -> list[str]:
        return [plugin.name for plugin in self._plugins]

    def __iter__(self) -> Iterator[ReExecutionPlugin]:
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)


register_plugin("overlay", lambda settings: ReExecutionOverlayPlugin(settings.REEXEC_OVERLAY))
register_plugin("reoptimize", lambda settings: ReOptimizePlugin(settings.REOPTIMIZE_OVERLAY))
register_plugin("reexecute_lost_am", lambda settings: ReExecuteLostAMPlugin())
register_plugin("dagsubmit", lambda settings: ReExecutionDagSubmitPlugin())
