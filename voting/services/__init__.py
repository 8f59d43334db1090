"""Services Layer — async orchestration around the pure election core.

Invariants:
    - Services own persistence and the in-memory election registry
    - Election rules are never re-implemented here; they live in core/

Design Decisions:
    - Imperative shell around functional core: load -> apply -> persist
"""
