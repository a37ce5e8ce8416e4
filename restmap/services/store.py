"""Store — generic CRUD adapter keyed by resource name over the async SQLAlchemy ORM.

Invariants:
    - Every method takes a resource name, never a model; models come from ModelRegistry
    - No per-request state: each call opens its own session, so one Store serves
      all controllers and concurrent requests
    - update/destroy check existence BEFORE touching the body or mutating anything
    - Taxonomy is closed: NotFoundError, BadRequestError, UnprocessableEntityError
    - Any other persistence error propagates unchanged (session rolled back)

Design Decisions:
    - Records returned as plain dicts built from mapped column attributes
    - Validation is the engine's own: @validates hooks raising ValueError on
      assignment, plus IntegrityError on commit
    - String ids and filter values coerced to the column's Python type; an id
      that cannot be coerced cannot exist, so it is a NotFound
"""

import logging
import uuid
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from restmap.core.domain_types import FindOptions, Record
from restmap.core.errors import (
    BadRequestError, ConfigurationError, ErrorContext, NotFoundError,
    UnprocessableEntityError,
)
from restmap.db.registry import ModelRegistry
from restmap.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)

_COERCIBLE_TYPES = (int, float, Decimal, uuid.UUID)


class Store:
    """Resource-keyed CRUD over the models in a ModelRegistry."""

    def __init__(self, registry: ModelRegistry, database: DatabaseSessionManager):
        self.registry = registry
        self.database = database

    # ─── Reads ───────────────────────────────────────────────────

    async def find_all(
        self,
        resource: str,
        filter: Mapping[str, Any] | None = None,
        options: FindOptions | None = None,
    ) -> list[Record]:
        """All records matching an equality filter, ordered by primary key."""
        model = self._model_for(resource)
        options = options or {}
        query = select(*_columns(model, resource, options.get("attributes")))
        for field_name, value in (filter or {}).items():
            attribute = _attribute(model, resource, field_name)
            try:
                value = _coerce(attribute, value)
            except (TypeError, ValueError, ArithmeticError):
                raise BadRequestError(
                    f"Invalid value for {field_name}",
                    ErrorContext(resource=resource),
                ) from None
            query = query.where(attribute == value)
        query = query.order_by(*inspect(model).primary_key)
        if options.get("limit") is not None:
            query = query.limit(options["limit"])
        if options.get("offset") is not None:
            query = query.offset(options["offset"])

        async with self.database.session() as db:
            result = await db.execute(query)
            return [dict(row) for row in result.mappings()]

    async def find_one(
        self, resource: str, record_id: Any, options: FindOptions | None = None,
    ) -> Record:
        """Single record by primary key."""
        model = self._model_for(resource)
        options = options or {}
        identity = _identity(model, resource, record_id)
        primary_key = inspect(model).primary_key[0]
        query = select(
            *_columns(model, resource, options.get("attributes")),
        ).where(primary_key == identity)

        async with self.database.session() as db:
            row = (await db.execute(query)).mappings().first()
        if row is None:
            raise NotFoundError(resource, record_id)
        return dict(row)

    # ─── Writes ──────────────────────────────────────────────────

    async def create_record(self, resource: str, body: Any = None) -> Record:
        model = self._model_for(resource)
        attributes = _require_body(body, resource)
        instance = model()
        _assign(instance, resource, attributes)

        async with self.database.session() as db:
            db.add(instance)
            await _commit(db, resource)
            await db.refresh(instance)
            record = _to_record(instance)
        logger.info(f"Created {resource}", extra={"resource": resource})
        return record

    async def update_record(
        self, resource: str, record_id: Any, body: Any = None,
    ) -> Record:
        model = self._model_for(resource)
        identity = _identity(model, resource, record_id)

        async with self.database.session() as db:
            instance = await db.get(model, identity)
            if instance is None:
                raise NotFoundError(resource, record_id)
            attributes = _require_body(body, resource)
            _assign(instance, resource, attributes)
            await _commit(db, resource)
            await db.refresh(instance)
            record = _to_record(instance)
        logger.info(
            f"Updated {resource}",
            extra={"resource": resource, "record_id": str(record_id)},
        )
        return record

    async def destroy_record(self, resource: str, record_id: Any) -> None:
        model = self._model_for(resource)
        identity = _identity(model, resource, record_id)

        async with self.database.session() as db:
            instance = await db.get(model, identity)
            if instance is None:
                raise NotFoundError(resource, record_id)
            await db.delete(instance)
            await _commit(db, resource)
        logger.info(
            f"Destroyed {resource}",
            extra={"resource": resource, "record_id": str(record_id)},
        )

    def _model_for(self, resource: str) -> type:
        model = self.registry.resolve(resource)
        if model is None:
            raise ConfigurationError(
                f"No model registered for resource '{resource}'",
                ErrorContext(resource=resource),
            )
        return model


# ─── Helpers ─────────────────────────────────────────────────────

def _attribute_keys(model: type) -> list[str]:
    return [attr.key for attr in inspect(model).column_attrs]


def _attribute(model: type, resource: str, name: str) -> Any:
    if name not in _attribute_keys(model):
        raise BadRequestError(
            f"{name} is not an attribute of {resource}",
            ErrorContext(resource=resource),
        )
    return getattr(model, name)


def _columns(model: type, resource: str, attributes: list[str] | None) -> list[Any]:
    if attributes is None:
        return [getattr(model, name) for name in _attribute_keys(model)]
    if not attributes:
        raise BadRequestError(
            f"No attributes selected for {resource}",
            ErrorContext(resource=resource),
        )
    return [_attribute(model, resource, name) for name in attributes]


def _coerce(attribute: Any, value: Any) -> Any:
    """Convert a string to the column's Python type; other values pass through."""
    if not isinstance(value, str):
        return value
    try:
        python_type = attribute.expression.type.python_type
    except NotImplementedError:
        return value
    if python_type is bool:
        lowered = value.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    if python_type in _COERCIBLE_TYPES:
        return python_type(value)
    return value


def _identity(model: type, resource: str, record_id: Any) -> Any:
    primary_key = inspect(model).primary_key[0]
    try:
        return _coerce(primary_key, record_id)
    except (TypeError, ValueError, ArithmeticError):
        raise NotFoundError(resource, record_id) from None


def _require_body(body: Any, resource: str) -> dict[str, Any]:
    if not isinstance(body, Mapping):
        raise BadRequestError(context=ErrorContext(resource=resource))
    return dict(body)


def _assign(instance: Any, resource: str, attributes: dict[str, Any]) -> None:
    """Set attributes in body order; the first validation failure wins."""
    keys = _attribute_keys(type(instance))
    for name, value in attributes.items():
        if name not in keys:
            raise UnprocessableEntityError(
                f"{name} is not an attribute of {resource}",
                ErrorContext(resource=resource),
            )
        try:
            setattr(instance, name, value)
        except ValueError as exc:
            raise UnprocessableEntityError(
                str(exc), ErrorContext(resource=resource),
            ) from exc


async def _commit(db: AsyncSession, resource: str) -> None:
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise UnprocessableEntityError(
            str(exc.orig), ErrorContext(resource=resource),
        ) from exc


def _to_record(instance: Any) -> Record:
    return {key: getattr(instance, key) for key in _attribute_keys(type(instance))}
