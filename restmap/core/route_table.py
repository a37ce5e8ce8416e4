"""Route Table — builder DSL that maps HTTP method/path pairs to controller actions.

Invariants:
    - Every Route is immutable; the table is frozen once the mapping callback returns
    - A method+path pair is registered at most once, so registration order never
      affects matching
    - resource(name) always produces the same six routes (PATCH and PUT both update)
    - Controllers are looked up by singularize(name) — same rule as Controller.name

Design Decisions:
    - Builder passed as a parameter (mapping(router)) instead of a rebound receiver
    - Builder methods return the Router for chaining
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from restmap.core.domain_types import HttpMethod
from restmap.core.errors import ConfigurationError
from restmap.core.naming import pluralize, singularize
from restmap.core.protocols import ControllerLike

logger = logging.getLogger(__name__)

ID_SEGMENT = "{id}"

# (method, member route?, action, success status)
_RESOURCE_ACTIONS: tuple[tuple[HttpMethod, bool, str, int], ...] = (
    (HttpMethod.GET, False, "index", 200),
    (HttpMethod.GET, True, "show", 200),
    (HttpMethod.POST, False, "create", 201),
    (HttpMethod.PATCH, True, "update", 200),
    (HttpMethod.PUT, True, "update", 200),
    (HttpMethod.DELETE, True, "destroy", 204),
)


@dataclass(frozen=True)
class Route:
    """One HTTP method + path bound to a controller action."""
    method: HttpMethod
    path: str
    controller: ControllerLike
    action: str
    status_code: int = 200

    @property
    def handler(self) -> Any:
        return getattr(self.controller, self.action)

    @property
    def name(self) -> str:
        return f"{self.controller.name}:{self.action}:{self.method.value.lower()}"


class Router:
    """Collects routes during the single mapping callback."""

    def __init__(self, controllers: Mapping[str, ControllerLike]):
        self._controllers = dict(controllers)
        self._routes: list[Route] = []
        self._frozen = False

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resource(self, name: str) -> "Router":
        """Register list/fetch/create/update/delete routes for a resource."""
        self._check_open()
        singular = singularize(name)
        controller = self._controller(singular)
        collection = f"/{pluralize(singular)}"
        for method, member, action, status_code in _RESOURCE_ACTIONS:
            path = f"{collection}/{ID_SEGMENT}" if member else collection
            self._add(Route(method, path, controller, action, status_code))
        logger.debug(f"Mapped resource '{singular}' at {collection}")
        return self

    def route(self, path: str, *, using: str, method: str = "get") -> "Router":
        """Register a single custom route; using is "<controller>:<action>"."""
        self._check_open()
        if not path.startswith("/"):
            raise ConfigurationError(f"Route path must start with '/': '{path}'")
        controller_name, sep, action = using.partition(":")
        if not sep or not controller_name or not action:
            raise ConfigurationError(
                f"Invalid route target '{using}', expected '<controller>:<action>'",
            )
        controller = self._controller(singularize(controller_name))
        if action.startswith("_") or not callable(getattr(controller, action, None)):
            raise ConfigurationError(
                f"Controller '{controller.name}' has no action '{action}'",
            )
        self._add(Route(_parse_method(method), path, controller, action))
        return self

    def freeze(self) -> tuple[Route, ...]:
        """End registration and return the final table."""
        self._frozen = True
        return self.routes

    def _controller(self, name: str) -> ControllerLike:
        controller = self._controllers.get(name)
        if controller is None:
            raise ConfigurationError(f"No controller registered for '{name}'")
        return controller

    def _add(self, route: Route) -> None:
        for existing in self._routes:
            if existing.method == route.method and existing.path == route.path:
                raise ConfigurationError(
                    f"Route {route.method.value} {route.path} is already mapped "
                    f"to {existing.name}",
                )
        self._routes.append(route)

    def _check_open(self) -> None:
        if self._frozen:
            raise ConfigurationError(
                "Route table is frozen: routes can only be added inside the mapping callback",
            )


def _parse_method(method: str) -> HttpMethod:
    try:
        return HttpMethod(method.upper())
    except ValueError:
        raise ConfigurationError(f"Unsupported HTTP method '{method}'") from None
