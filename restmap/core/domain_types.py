"""Domain Types — shared value types passed between router, controllers and store.

Invariants:
    - Records are plain attribute mappings (column key -> value), never ORM instances
    - ActionRequest is immutable once built by the HTTP boundary
    - All HTTP verbs encoded as HttpMethod — no raw string matching

Design Decisions:
    - TypedDict for FindOptions: callers pass plain dicts, type checker still sees the keys
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict


# ─── Value Types ─────────────────────────────────────────────────

Record = dict[str, Any]


class FindOptions(TypedDict, total=False):
    """Query options accepted by Store.find_all / Store.find_one."""
    attributes: list[str]
    limit: int
    offset: int


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """HTTP verbs a route may be registered under."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


# ─── Request Envelope ────────────────────────────────────────────

@dataclass(frozen=True)
class ActionRequest:
    """Request parameters handed to a controller action."""
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: Any = None
    claims: dict[str, Any] | None = None
