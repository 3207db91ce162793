"""
Query Re-Execution Orchestrator.

Re-submits a failed query when the failure came from the execution
infrastructure rather than from the query itself:
- Lost application master (container exit -100, vanished AM record, lost DAG)
- Failed DAG submission
- Vertex failures worth retrying with a settings overlay
- Memory exhaustion that a re-optimized plan can avoid

Architecture: pluggable failure classifiers vote through on-failure hooks,
an orchestrator sequences attempts under a retry budget and OR-aggregates
the votes.
"""

__version__ = "0.1.0"
