"""Infrastructure Layer — logging, database sessions and collaborator adapters.

Invariants:
    - Adapters here implement core/protocols.py contracts
    - No election rules live here; rules stay in core/

Design Decisions:
    - One module per external concern (database, observability, events, access)
"""
