"""
Re-execution plugins (failure classifiers).

Each plugin registers an on-failure hook, keeps its own per-query state and
votes on whether the query should run again.

Bundled plugins (strategy name -> class):
    - overlay: ReExecutionOverlayPlugin
    - reoptimize: ReOptimizePlugin
    - reexecute_lost_am: ReExecuteLostAMPlugin
    - dagsubmit: ReExecutionDagSubmitPlugin
"""

from query_reexecution.plugins.base import DagLineage, ReExecutionPlugin, RetryVote
from query_reexecution.plugins.dag_submit import ReExecutionDagSubmitPlugin
from query_reexecution.plugins.exceptions import UnknownPluginError
from query_reexecution.plugins.lost_am import ReExecuteLostAMPlugin
from query_reexecution.plugins.overlay import ReExecutionOverlayPlugin
from query_reexecution.plugins.patterns import FailurePattern, classify
from query_reexecution.plugins.registry import (
    PluginRegistry,
    get_plugin_factory,
    register_plugin,
    registered_plugins,
)
from query_reexecution.plugins.reoptimize import ReOptimizePlugin

__all__ = [
    "ReExecutionPlugin",
    "RetryVote",
    "DagLineage",
    "FailurePattern",
    "classify",
    "ReExecuteLostAMPlugin",
    "ReExecutionOverlayPlugin",
    "ReOptimizePlugin",
    "ReExecutionDagSubmitPlugin",
    "PluginRegistry",
    "register_plugin",
    "get_plugin_factory",
    "registered_plugins",
    "UnknownPluginError",
]
