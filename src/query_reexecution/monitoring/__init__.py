"""Monitoring and metrics instrumentation for the re-execution orchestrator.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from query_reexecution.monitoring.metrics import (
    reexec_attempts_total,
    reexec_plugin_faults_total,
    reexec_queries_total,
    reexec_votes_total,
)

__all__ = [
    "reexec_attempts_total",
    "reexec_queries_total",
    "reexec_votes_total",
    "reexec_plugin_faults_total",
]
