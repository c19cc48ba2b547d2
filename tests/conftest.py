from __future__ import annotations

from urllib.parse import parse_qsl

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response


def build_echo_app() -> FastAPI:
    """Small echo service: GET reflects the path name and query, POST reflects the body."""

    app = FastAPI(title="echo")

    @app.get("/empty")
    def empty() -> Response:
        return Response(status_code=200)

    @app.get("/headers")
    def headers(request: Request) -> dict[str, str]:
        return dict(request.headers)

    @app.get("/{name}")
    def echo_query(name: str, request: Request) -> dict[str, str]:
        return {name: name, **dict(request.query_params)}

    @app.post("/json")
    async def echo_json(request: Request) -> Response:
        return Response(
            content=await request.body(),
            media_type="application/json",
        )

    @app.post("/form")
    async def echo_form(request: Request) -> JSONResponse:
        body = (await request.body()).decode("utf-8")
        return JSONResponse(
            {
                "content_type": request.headers.get("content-type"),
                "fields": dict(parse_qsl(body)),
            }
        )

    return app


@pytest.fixture()
def echo_app() -> FastAPI:
    return build_echo_app()
