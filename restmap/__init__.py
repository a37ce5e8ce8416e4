"""RestMap — convention-based REST framework on FastAPI and async SQLAlchemy.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only (restmap.application, restmap.services.controller)
"""
