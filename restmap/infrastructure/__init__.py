"""Infrastructure Layer — database sessions, token verification, module loading, logging.

Invariants:
    - Wraps third-party clients (SQLAlchemy, PyJWT, importlib) behind small classes/functions
    - Failures surface as core/errors.py exceptions or propagate unchanged
"""
