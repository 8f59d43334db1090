"""Database Package — declarative base shared by all ORM models.

Invariants:
    - Only Base lives here; engines and sessions live in infrastructure/database.py
"""
