"""Shared fixtures: a recording fake HTTP target and a fixed local timezone."""

import json
import os
import time

import httpx
import pytest


class FakeTarget:
    """Serves canned responses by URL path and records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, status: int = 200, body: str | dict = "") -> None:
        data = json.dumps(body) if isinstance(body, dict) else body
        self.routes[path] = (status, data.encode("utf-8"))

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(request.url.path, (404, b"not found"))
        return httpx.Response(status, content=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_target():
    return FakeTarget()


@pytest.fixture
def utc_local_time():
    """Make local time UTC so rendered timestamps are predictable."""
    saved = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()
    yield
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()
