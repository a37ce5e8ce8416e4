"""Boundary Protocols — contracts between the pure route table and the shell.

Invariants:
    - core/ never imports from services/, api/ or infrastructure/
    - Controllers are reached only through ControllerLike

Design Decisions:
    - Protocol over ABC: structural subtyping, the route table accepts any
      object with a name and async actions
"""

from typing import Protocol


class ControllerLike(Protocol):
    """Structural contract for controllers bound by the Router."""
    name: str
