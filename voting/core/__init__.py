"""Core Layer — election state, workflow rules and tally, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Rule checks and tally are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell (persistence and HTTP live outside)
"""
