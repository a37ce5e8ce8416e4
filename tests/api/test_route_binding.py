"""Route Binding — ActionRequest construction and result rendering."""

from datetime import date

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from restmap.api.route_binding import bind_routes, render_result
from restmap.core.domain_types import HttpMethod
from restmap.core.route_table import Route


class EchoController:
    name = "echo"

    async def echo(self, request):
        return {"params": request.params, "query": request.query, "body": request.body}

    async def text(self, request):
        return PlainTextResponse("hello", status_code=202)

    async def gone(self, request):
        return {"ignored": True}

    async def member(self, request):
        return {"member": request.params["id"]}

    async def literal(self, request):
        return {"literal": True}


def _app():
    controller = EchoController()
    app = FastAPI()
    bind_routes(app, [
        Route(HttpMethod.POST, "/echo/{id}", controller, "echo", 201),
        Route(HttpMethod.GET, "/text", controller, "text"),
        Route(HttpMethod.DELETE, "/gone/{id}", controller, "gone", 204),
    ])
    return app


async def test_action_request_parts(make_client):
    async with make_client(_app()) as client:
        resp = await client.post("/echo/7?sort=asc", json={"firstName": "john"})

    assert resp.status_code == 201
    assert resp.json() == {
        "params": {"id": "7"},
        "query": {"sort": "asc"},
        "body": {"firstName": "john"},
    }


async def test_empty_or_undecodable_body_is_none(make_client):
    async with make_client(_app()) as client:
        empty = await client.post("/echo/1")
        garbage = await client.post(
            "/echo/1", content=b"{not json", headers={"content-type": "application/json"},
        )

    assert empty.json()["body"] is None
    assert garbage.json()["body"] is None


async def test_response_passes_through(make_client):
    async with make_client(_app()) as client:
        resp = await client.get("/text")
    assert resp.status_code == 202
    assert resp.text == "hello"


async def test_no_content_route(make_client):
    async with make_client(_app()) as client:
        resp = await client.delete("/gone/1")
    assert resp.status_code == 204
    assert resp.content == b""


def test_route_names_registered():
    names = {route.name for route in _app().routes if hasattr(route, "methods")}
    assert "echo:echo:post" in names


def test_render_result_encodes_json():
    resp = render_result({"id": 1, "on": date(2024, 1, 2)}, 200)
    assert resp.status_code == 200
    assert resp.body == b'{"id":1,"on":"2024-01-02"}'


async def test_literal_path_wins_over_later_parameter_route(make_client):
    controller = EchoController()
    app = FastAPI()
    bind_routes(app, [
        Route(HttpMethod.GET, "/echoes/{id}", controller, "member"),
        Route(HttpMethod.GET, "/echoes/latest", controller, "literal"),
    ])

    async with make_client(app) as client:
        literal = await client.get("/echoes/latest")
        member = await client.get("/echoes/7")

    assert literal.json() == {"literal": True}
    assert member.json() == {"member": "7"}
