"""
Unit tests for the Query Re-Execution Orchestrator.

Test individual components in isolation:
- Models (failure events, plan snapshots)
- Hook runner (ordering, fault isolation)
- Plugins (pattern table, lost AM, overlay, reoptimize, DAG submit, registry)
- Orchestration (budget, metadata, control loop)
"""
