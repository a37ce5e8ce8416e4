"""Naming Conventions — pure string transforms that bind controllers, resources and models.

Invariants:
    - singularize() is the canonical form; every internal lookup goes through it
    - Pluralization is a single trailing "s" (foo <-> foos, user <-> users)
    - Controller, ModelRegistry and Router all derive names from this module only

Design Decisions:
    - No irregular plurals: no evidence of them in any mapped resource
"""

CONTROLLER_SUFFIX = "Controller"


def _strip_plural(name: str) -> str:
    if len(name) > 1 and name.endswith("s"):
        return name[:-1]
    return name


def singularize(name: str) -> str:
    """Lowercase singular form of a resource name."""
    return _strip_plural(name.strip().lower())


def pluralize(name: str) -> str:
    """Collection form used in route paths: singular + "s"."""
    return f"{singularize(name)}s"


def controller_resource_name(class_name: str) -> str:
    """UserController -> "user". Names without the suffix are only lowercased."""
    if class_name.endswith(CONTROLLER_SUFFIX) and class_name != CONTROLLER_SUFFIX:
        class_name = class_name[: -len(CONTROLLER_SUFFIX)]
    return class_name.lower()


def model_class_name(resource: str) -> str:
    """Model class name for a resource: "users" -> "User", "blogPost" -> "BlogPost"."""
    singular = _strip_plural(resource.strip())
    return singular[:1].upper() + singular[1:]
