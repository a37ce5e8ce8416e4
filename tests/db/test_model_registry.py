"""Model Registry — convention lookup by capitalized singular name.

Tests cover:
    - resolve() by singular, plural and explicit class name
    - Missing models resolve to None
    - Duplicate class names rejected, re-registration of the same class tolerated
    - from_base() collects every mapped class of a declarative base
"""

import pytest
from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from restmap.core.errors import ConfigurationError
from restmap.db.registry import ModelRegistry


class LocalBase(DeclarativeBase):
    pass


class Widget(LocalBase):
    __tablename__ = "widgets"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Gadget(LocalBase):
    __tablename__ = "gadgets"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)


@pytest.mark.parametrize("resource", ["widget", "widgets", "Widget"])
def test_resolve_by_convention(resource):
    assert ModelRegistry([Widget]).resolve(resource) is Widget


def test_resolve_missing_returns_none():
    registry = ModelRegistry([Widget])
    assert registry.resolve("gadget") is None
    assert "gadget" not in registry
    assert "widget" in registry


def test_resolve_is_case_sensitive_beyond_first_letter():
    assert ModelRegistry([Widget]).resolve("wIDGET") is None


def test_duplicate_class_name_rejected():
    other = type("Widget", (), {})
    registry = ModelRegistry([Widget])
    with pytest.raises(ConfigurationError):
        registry.register(other)


def test_same_class_registered_twice_is_idempotent():
    registry = ModelRegistry([Widget, Widget])
    assert len(registry) == 1


def test_from_base_collects_mapped_classes():
    registry = ModelRegistry.from_base(LocalBase)
    assert registry.names() == ["Gadget", "Widget"]
    assert set(registry) == {Gadget, Widget}


def test_fixture_models_loaded(registry):
    assert {"Foo", "User"} <= set(registry.names())
