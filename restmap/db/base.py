"""SQLAlchemy Declarative Base — default base class for application models.

Invariants:
    - Models resolved by ModelRegistry.from_base(Base) must inherit from Base
    - Base is the single source of truth for table metadata

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Applications may bring their own DeclarativeBase; registry and loader accept any mapped class
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for RestMap ORM models."""
    pass
