"""Route Binding — installs a frozen route table on a FastAPI application.

Invariants:
    - One FastAPI route per Route; method+path pairs are already unique
    - Controllers receive an ActionRequest, never the Starlette Request
    - Empty or undecodable JSON bodies reach the controller as None
    - A Response returned by an action is sent as-is
    - Routes with fewer path parameters bind first, so "/users/me" is never
      captured by "/users/{id}" whatever the registration order

Design Decisions:
    - Endpoints take only `request: Request`: FastAPI does no body validation,
      the Store owns the BadRequest/UnprocessableEntity decisions
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from restmap.core.domain_types import ActionRequest
from restmap.core.route_table import Route

logger = logging.getLogger(__name__)


def bind_routes(app: FastAPI, routes: Iterable[Route]) -> None:
    """Register every route of the table on the app, literal paths first."""
    count = 0
    for route in sorted(routes, key=_parameter_count):
        app.add_api_route(
            route.path,
            _make_endpoint(route),
            methods=[route.method.value],
            status_code=route.status_code,
            name=route.name,
        )
        count += 1
    logger.info(f"Bound {count} route(s)")


def _parameter_count(route: Route) -> int:
    return route.path.count("{")


def _make_endpoint(route: Route):
    async def endpoint(request: Request) -> Response:
        action_request = await build_action_request(request)
        result = await route.handler(action_request)
        return render_result(result, route.status_code)

    endpoint.__name__ = f"{route.controller.name}_{route.action}"
    return endpoint


async def build_action_request(request: Request) -> ActionRequest:
    return ActionRequest(
        params=dict(request.path_params),
        query=dict(request.query_params),
        body=await _read_body(request),
        claims=getattr(request.state, "claims", None),
    )


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug(
            "Undecodable request body",
            extra={"path": request.url.path, "method": request.method},
        )
        return None


def render_result(result: Any, status_code: int) -> Response:
    if isinstance(result, Response):
        return result
    if status_code == 204:
        return Response(status_code=204)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result))
