"""Session hook dispatch."""

from query_reexecution.hooks.runner import FailureHook, HookRunner

__all__ = ["FailureHook", "HookRunner"]
