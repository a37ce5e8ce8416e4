"""Controller — per-resource action set bound to the shared Store by naming convention.

Invariants:
    - name = own class name minus "Controller", lowercased (UserController -> "user")
    - internal_model resolves through ModelRegistry and may be None (action-only controllers)
    - Constructing a controller never raises for a missing model
    - CRUD actions key the Store by self.name and forward params/body unchanged
    - index() reads limit, offset and attributes (comma separated) from the query;
      every other query key is an equality filter

Design Decisions:
    - Model override via constructor argument or `model` class attribute
    - Store injected through the constructor, never a module-level global
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from restmap.core.domain_types import ActionRequest, FindOptions, Record
from restmap.core.errors import BadRequestError, ErrorContext
from restmap.core.naming import controller_resource_name
from restmap.services.store import Store

logger = logging.getLogger(__name__)


class Controller:
    """Base class for resource controllers."""

    model: ClassVar[str | None] = None

    def __init__(self, store: Store, model: str | None = None):
        self.store = store
        self.name = controller_resource_name(type(self).__name__)
        self.internal_model = store.registry.resolve(model or self.model or self.name)
        if self.internal_model is None:
            logger.debug(f"Controller '{self.name}' has no backing model")

    @property
    def resource(self) -> str:
        """Store key used by the CRUD actions."""
        return self.name

    async def index(self, request: ActionRequest) -> list[Record]:
        filter, options = split_query(self.resource, request.query)
        return await self.store.find_all(self.resource, filter, options)

    async def show(self, request: ActionRequest) -> Record:
        return await self.store.find_one(self.resource, request.params["id"])

    async def create(self, request: ActionRequest) -> Record:
        return await self.store.create_record(self.resource, request.body)

    async def update(self, request: ActionRequest) -> Record:
        return await self.store.update_record(
            self.resource, request.params["id"], request.body,
        )

    async def destroy(self, request: ActionRequest) -> None:
        await self.store.destroy_record(self.resource, request.params["id"])

    def __repr__(self) -> str:
        model: Any = getattr(self.internal_model, "__name__", None)
        return f"<{type(self).__name__} name={self.name!r} model={model!r}>"


# ─── Query Options ───────────────────────────────────────────────

PAGINATION_KEYS = ("limit", "offset")
ATTRIBUTES_KEY = "attributes"


def split_query(
    resource: str, query: Mapping[str, Any],
) -> tuple[dict[str, Any], FindOptions]:
    """Separate find options from equality filters in a query string mapping."""
    filter = dict(query)
    options: FindOptions = {}
    for key in PAGINATION_KEYS:
        if key in filter:
            options[key] = _non_negative_int(resource, key, filter.pop(key))
    if ATTRIBUTES_KEY in filter:
        raw = filter.pop(ATTRIBUTES_KEY)
        options["attributes"] = [name.strip() for name in raw.split(",") if name.strip()]
    return filter, options


def _non_negative_int(resource: str, key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = -1
    if number < 0:
        raise BadRequestError(
            f"Invalid value for {key}", ErrorContext(resource=resource),
        )
    return number
