from __future__ import annotations

import base64
import json
from typing import Optional

import httpx
import pytest

ORIGIN = "https://registry.test"
REALM = "https://auth.test/token"
GOOD_TOKEN = "1234567890abcdefghijklmnopqrstuvwxyz"
REALM_USER = ("rjohn", "rsomepass")
ORIGIN_USER = ("john", "somepass")
BEARER_CHALLENGE = f'Bearer realm="{REALM}",service="registry.test"'


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "asyncio" in item.keywords:
            item.add_marker(pytest.mark.asyncio)


def basic_credentials(request: httpx.Request) -> Optional[tuple[str, str]]:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Basic "):
        return None
    decoded = base64.b64decode(header[len("Basic "):]).decode("utf-8")
    user, _, password = decoded.partition(":")
    return user, password


class FakeRegistry:
    """Origin and realm servers behind a single mock transport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "auth.test":
            return self._realm(request)
        return self._origin(request)

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "auth.test"]

    def _realm(self, request: httpx.Request) -> httpx.Response:
        if basic_credentials(request) == REALM_USER:
            return httpx.Response(200, json={"token": GOOD_TOKEN, "expires_in": 300})
        return httpx.Response(401, text="invalid realm credentials")

    def _origin(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/foo":
            return httpx.Response(200, headers={"x-my-header": "here"}, text="bar")
        if path == "/auth":
            if basic_credentials(request) == ORIGIN_USER:
                return httpx.Response(200, text="auth")
            return httpx.Response(401)
        if path == "/realm":
            token = request.headers.get("Authorization")
            if not token:
                return httpx.Response(401, headers={"WWW-Authenticate": BEARER_CHALLENGE})
            if token == f"Bearer {GOOD_TOKEN}":
                return httpx.Response(200, text="realm")
            return httpx.Response(401, headers={"WWW-Authenticate": "Bearer invalid_token"})
        if path == "/echo":
            payload = {
                "method": request.method,
                "body": request.content.decode("utf-8"),
                "headers": request.headers.get_list("x-test"),
                "authorization": request.headers.get("Authorization"),
            }
            if request.headers.get("Authorization") != f"Bearer {GOOD_TOKEN}":
                return httpx.Response(401, headers={"WWW-Authenticate": BEARER_CHALLENGE})
            return httpx.Response(200, text=json.dumps(payload))
        if path == "/basic":
            return httpx.Response(401, headers={"WWW-Authenticate": 'Basic realm="x"'})
        if path == "/bare":
            return httpx.Response(401, text="no challenge")
        if path == "/always":
            return httpx.Response(401, headers={"WWW-Authenticate": BEARER_CHALLENGE})
        return httpx.Response(404)


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def transport(registry: FakeRegistry) -> httpx.MockTransport:
    return httpx.MockTransport(registry.handle)
