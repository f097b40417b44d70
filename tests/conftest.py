"""Test fixtures for shov-mcp.

HTTP behaviour is exercised against a real local aiohttp server rather than
mocks, so streaming reads see genuine chunk boundaries.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from shov_mcp.types import Manifest

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass
class RecordedRequest:
    """What the fake API saw for one request."""

    method: str
    raw_path: str
    query_string: str
    headers: dict[str, str]
    body: str


@dataclass
class FakeAPI:
    """Catch-all aiohttp app that records requests and answers from a route table.

    Routes are keyed by "METHOD /path" (path without query string).
    Unknown routes answer 404.
    """

    routes: dict[str, Handler] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[f"{method} {path}"] = handler

    def json(self, method: str, path: str, payload: Any, status: int = 200) -> None:
        async def handler(request: web.Request) -> web.StreamResponse:
            return web.json_response(payload, status=status)

        self.route(method, path, handler)

    def text(
        self,
        method: str,
        path: str,
        text: str,
        status: int = 200,
        content_type: str = "text/plain",
    ) -> None:
        async def handler(request: web.Request) -> web.StreamResponse:
            return web.Response(text=text, status=status, content_type=content_type)

        self.route(method, path, handler)

    def sse(self, method: str, path: str, chunks: list[bytes]) -> None:
        """Answer with an event stream written one chunk per write."""

        async def handler(request: web.Request) -> web.StreamResponse:
            response = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
            await response.prepare(request)
            for chunk in chunks:
                await response.write(chunk)
                await asyncio.sleep(0)
            await response.write_eof()
            return response

        self.route(method, path, handler)

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                raw_path=request.rel_url.raw_path,
                query_string=request.query_string,
                headers=dict(request.headers),
                body=await request.text(),
            )
        )
        handler = self.routes.get(f"{request.method} {request.path}")
        if handler is None:
            return web.Response(status=404, text="no such route")
        return await handler(request)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._dispatch)
        return app


@asynccontextmanager
async def serve(api: FakeAPI) -> AsyncIterator[str]:
    """Run the fake API on a local port and yield its base URL."""
    server = TestServer(api.app())
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}"
    finally:
        await server.close()


# A port nothing listens on.
UNREACHABLE_URL = "http://127.0.0.1:1"


def manifest_doc(base_url: str) -> dict[str, Any]:
    """A small manifest whose handlers point at base_url."""
    return {
        "name": "demo",
        "version": "2.0.0",
        "tools": [
            {
                "name": "get_user",
                "description": "Get a user by id",
                "inputSchema": {
                    "type": "object",
                    "properties": {"id": {"type": "string"}},
                    "required": ["id"],
                },
                "handler": {"method": "GET", "url": f"{base_url}/users/{{id}}"},
            },
            {
                "name": "create_note",
                "description": "Create a note",
                "inputSchema": {
                    "type": "object",
                    "properties": {"title": {"type": "string"}, "body": {"type": "string"}},
                },
                "handler": {"method": "POST", "url": f"{base_url}/notes"},
            },
            {
                "name": "ask",
                "description": "Ask the assistant, streamed",
                "inputSchema": {"type": "object", "properties": {"q": {"type": "string"}}},
                "handler": {"method": "POST", "url": f"{base_url}/ask"},
            },
        ],
    }


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def demo_manifest() -> Manifest:
    """Manifest pointing at an address nothing listens on (for non-network tests)."""
    return Manifest.from_dict(manifest_doc(UNREACHABLE_URL))
