"""
Test fixtures for the Query Re-Execution Orchestrator.

Engine error messages as reported by the DAG runtime, used by the
integration scenarios.
"""

LOST_AM_CONTAINER_MESSAGE = (
    "Application application_1700000000000_0042 failed 2 times due to "
    "AM Container for appattempt_1700000000000_0042_000002 exited with exitCode: -100\n"
    "Failing this attempt. Diagnostics: Container released on a *lost* node"
)

UNMANAGED_AM_MESSAGE = (
    "Unable to reach AM session: AM record not found (likely died) for "
    "application_1700000000000_0077"
)

DAG_LOST_MESSAGE = "Dag status unavailable: No running DAG at present"

TABLE_NOT_FOUND_MESSAGE = "table not found: foo"

OOM_MESSAGE = (
    "Vertex failed, vertexName=Map 1, vertexId=vertex_1700000000000_0042_1_00, "
    "diagnostics=[Task failed, java.lang.OutOfMemoryError: Java heap space]"
)
