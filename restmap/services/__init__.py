"""Services Layer — the Store and the Controller base class.

Invariants:
    - Controllers reach persistence only through the shared Store
    - Services raise core/errors.py exceptions, never HTTP responses
"""
