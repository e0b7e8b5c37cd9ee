# Redash MCP Server
# File: tests/conftest.py
# Version: v2

"""Shared fixtures: a fake Redash API behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from redash_mcp.client import RedashClient
from redash_mcp.config import RedashConfig

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeRedash:
    """Route table keyed by (method, path).

    Each route holds a list of replies consumed in order; the last one is
    repeated once the others are used up. Unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, *replies: Reply) -> None:
        self.routes[(method, path)] = list(replies)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        replies = self.routes.get((request.method, request.url.path))
        if not replies:
            return httpx.Response(404, json={"message": "Not found"})

        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply):
            return reply(request)

        status, payload = reply
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)


@pytest.fixture
def redash() -> FakeRedash:
    return FakeRedash()


@pytest.fixture
def config() -> RedashConfig:
    return RedashConfig(url="https://redash.test/", api_key="secret-key", timeout_ms=5000)


@pytest.fixture
def client(config: RedashConfig, redash: FakeRedash) -> RedashClient:
    return RedashClient(config=config, transport=httpx.MockTransport(redash))
