"""Database Layer — declarative base and the resource-to-model registry.

Invariants:
    - Models are resolved by class name only (ModelRegistry)
    - Nothing here opens connections; sessions live in infrastructure/database.py
"""
