"""Model Registry — resolves a resource name to its persistence model by convention.

Invariants:
    - resolve() is a pure lookup: capitalized singular form, exact and case-sensitive
    - A missing model resolves to None, never an exception
    - Populated once at startup; one model per class name

Design Decisions:
    - Keyed by class name (__name__), matching model_class_name() in core/naming.py
"""

import logging
from collections.abc import Iterable, Iterator

from sqlalchemy.orm import DeclarativeBase

from restmap.core.errors import ConfigurationError
from restmap.core.naming import model_class_name

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Class-name keyed map of SQLAlchemy mapped classes."""

    def __init__(self, models: Iterable[type] = ()):
        self._models: dict[str, type] = {}
        for model in models:
            self.register(model)

    @classmethod
    def from_base(cls, base: type[DeclarativeBase]) -> "ModelRegistry":
        """Registry of every class mapped on a declarative base."""
        return cls(mapper.class_ for mapper in base.registry.mappers)

    def register(self, model: type) -> None:
        name = model.__name__
        existing = self._models.get(name)
        if existing is not None and existing is not model:
            raise ConfigurationError(f"Duplicate model class name '{name}'")
        self._models[name] = model
        logger.debug(f"Registered model {name}")

    def resolve(self, resource: str) -> type | None:
        """Model for a resource name ("user", "users" -> User), or None."""
        return self._models.get(model_class_name(resource))

    def names(self) -> list[str]:
        return sorted(self._models)

    def __contains__(self, resource: str) -> bool:
        return self.resolve(resource) is not None

    def __iter__(self) -> Iterator[type]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
