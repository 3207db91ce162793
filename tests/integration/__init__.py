"""
Integration tests for the Query Re-Execution Orchestrator.

Run the orchestrator with the bundled plugins against an in-process fake
engine driver, end to end: failure -> hooks -> votes -> recompile -> retry.
"""
