"""Test doubles shared by the unit tests."""

import json
from collections.abc import Callable

import httpx

KEYCLOAK_URL = "http://keycloak:8080"


class MockResponse:
    """Mock HTTP response object."""

    def __init__(self, status_code: int, json_data=None, headers=None, text=""):
        self.status_code = status_code
        self._json_data = json_data
        self.headers = headers or {}
        self.text = text if text or json_data is None else json.dumps(json_data)
        self.content = self.text.encode()

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


def respond(status_code: int, **kwargs) -> Callable[[httpx.Request], httpx.Response]:
    """Build a route that answers every request with a fresh response."""

    def route(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return route


TOKEN_ROUTE = respond(
    200, json={"access_token": "admin-token", "token_type": "Bearer", "expires_in": 60}
)


class RecordingTransport:
    """
    httpx.MockTransport that answers from a (method, path) routing table
    and records every request.

    Unrouted requests get a 500 so that unexpected calls fail loudly.
    """

    def __init__(self, routes: dict[tuple[str, str], Callable]):
        self.routes = routes
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                500, text=f"unexpected {request.method} {request.url.path}"
            )
        return route(request)

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        """Return (method, path) of recorded requests."""
        return [
            (request.method, request.url.path)
            for request in self.requests
            if method is None or request.method == method
        ]

    def json_body(self, method: str, path: str) -> dict:
        """Decoded JSON body of the first matching request."""
        for request in self.requests:
            if request.method == method and request.url.path == path:
                return json.loads(request.content)
        raise AssertionError(f"No {method} {path} request recorded")
