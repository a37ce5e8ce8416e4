"""Core Layer — pure naming, routing and error logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Naming and exemption functions are pure; the Router only holds in-memory state
"""
