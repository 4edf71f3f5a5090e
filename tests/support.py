"""Scripted stand-in for the remote service, shared by the unit tests."""

import asyncio
from typing import Any
from urllib.parse import parse_qs

import httpx

# Scripted item that never answers, so the client-side timeout fires
HANG = object()


def json_response(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


class ScriptedService:
    """Stand-in for the remote service behind an httpx.MockTransport.

    Responses are queued per ``(method, path prefix)``. Each request consumes
    the next queued item; the last one keeps being replayed. An item can be an
    httpx.Response, an exception to raise, or HANG.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Any]] = {}

    def on(self, method: str, prefix: str, *items: Any) -> None:
        self._routes[(method.upper(), prefix)] = list(items)

    def calls(self, method: str, prefix: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path.startswith(prefix)
        ]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)

        for (method, prefix), queue in self._routes.items():
            if request.method == method and request.url.path.startswith(prefix):
                item = queue.pop(0) if len(queue) > 1 else queue[0]
                break
        else:
            return json_response(404, {"detail": "Not Found"})

        if item is HANG:
            await asyncio.sleep(3600)
        if isinstance(item, Exception):
            raise item
        return item


def form_fields(request: httpx.Request) -> dict[str, str]:
    """Decode an url-encoded form body into single values."""
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
