"""Custom Prometheus metrics for the Query Re-Execution Orchestrator.

The embedding service exposes these through its own /metrics endpoint.
Alert rules should be configured for:
- reexec_attempts_total (rising failed/retried ratio points at cluster instability)
- reexec_plugin_faults_total (any fault is a plugin bug)
"""

from prometheus_client import Counter

# === Attempt Metrics ===

reexec_attempts_total = Counter(
    "reexec_attempts_total",
    "Total query execution attempts by outcome",
    ["outcome"],
)
"""
Execution attempts counter.

Labels:
- outcome: succeeded, failed

Every attempt is counted, the first one included, so
failed / (succeeded + failed) is the raw attempt failure rate.
"""

reexec_queries_total = Counter(
    "reexec_queries_total",
    "Total queries handled by the orchestrator by final outcome",
    ["outcome"],
)
"""
Query outcome counter.

Labels:
- outcome: succeeded, succeeded_after_retry, failed, budget_exhausted, cancelled

Alert thresholds:
- WARN: budget_exhausted > 1% of queries
"""

# === Plugin Metrics ===

reexec_votes_total = Counter(
    "reexec_votes_total",
    "Re-execution votes cast by plugin, poll stage and vote",
    ["plugin", "stage", "vote"],
)
"""
Plugin votes counter.

Labels:
- plugin: reexecute_lost_am, overlay, reoptimize, dagsubmit, ...
- stage: after_failure, after_compile
- vote: true, false
"""

reexec_plugin_faults_total = Counter(
    "reexec_plugin_faults_total",
    "Exceptions raised inside plugin hooks or vote methods",
    ["plugin", "stage"],
)
"""
Plugin fault counter. A faulting plugin abstains.

Labels:
- plugin: plugin name (or hook name for foreign hooks)
- stage: on_failure, after_failure, after_compile, prepare

Alert thresholds:
- WARN: any increase
"""
