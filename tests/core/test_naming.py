"""Naming conventions — the single string transform shared by controllers, registry and router.

Tests cover:
    - singularize strips one trailing "s" and lowercases
    - pluralize always yields singular + "s"
    - controller_resource_name strips the Controller suffix
    - model_class_name capitalizes the singular form only at the first letter
"""

import pytest

from restmap.core.naming import (
    controller_resource_name,
    model_class_name,
    pluralize,
    singularize,
)


@pytest.mark.parametrize("name, expected", [
    ("foos", "foo"),
    ("foo", "foo"),
    ("user", "user"),
    ("Users", "user"),
    (" users ", "user"),
    ("s", "s"),
])
def test_singularize(name, expected):
    assert singularize(name) == expected


@pytest.mark.parametrize("name, expected", [
    ("foo", "foos"),
    ("foos", "foos"),
    ("User", "users"),
])
def test_pluralize(name, expected):
    assert pluralize(name) == expected


def test_pluralize_inverts_singularize():
    assert singularize(pluralize("widget")) == "widget"


@pytest.mark.parametrize("class_name, expected", [
    ("UserController", "user"),
    ("SomeController", "some"),
    ("ResetPasswordController", "resetpassword"),
    ("Ping", "ping"),
    ("Controller", "controller"),
])
def test_controller_resource_name(class_name, expected):
    assert controller_resource_name(class_name) == expected


@pytest.mark.parametrize("resource, expected", [
    ("user", "User"),
    ("users", "User"),
    ("foo", "Foo"),
    ("blogPost", "BlogPost"),
])
def test_model_class_name(resource, expected):
    assert model_class_name(resource) == expected


def test_model_class_name_matches_controller_derivation():
    assert model_class_name(controller_resource_name("UserController")) == "User"
