"""
Shared fixtures: a Flask test client wired to an in-memory backend.

``FakeBackend`` stands in for the ``requests.Session`` the app uses to reach
the REST backend. Routes are registered per test with ``backend.on(...)``;
every call is recorded so tests can assert on what was sent.
"""
import json as _json
from dataclasses import dataclass

import pytest

from quizweb import create_app

BASE_URL = "http://backend.test"

ADMIN = {
    "id": 1,
    "email": "admin@quiz.test",
    "roles": ["ROLE_ADMIN"],
    "firstName": "Ada",
    "lastName": "Admin",
}
STUDENT = {
    "id": 2,
    "email": "student@quiz.test",
    "roles": ["ROLE_USER"],
    "firstName": "Sam",
    "lastName": "Student",
}


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self._body = body
        self.content = b"" if body is None else _json.dumps(body).encode()
        self.text = self.content.decode()

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


@dataclass
class Call:
    method: str
    path: str
    json: object
    headers: dict


class FakeBackend:
    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url
        self.routes = {}
        self.calls: list[Call] = []

    def on(self, method: str, path: str, status: int = 200, body=None, handler=None):
        """Answer *method path* with *status*/*body*, or with ``handler(call)``."""
        self.routes[(method.upper(), path)] = handler or (status, body)

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = url[len(self.base_url):]
        call = Call(method.upper(), path, json, dict(headers or {}))
        self.calls.append(call)
        route = self.routes.get((call.method, path))
        if route is None:
            return FakeResponse(404, {"message": f"no route for {call.method} {path}"})
        if callable(route):
            return route(call)
        status, body = route
        return FakeResponse(status, body)

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    return create_app("testing", http=backend)


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in(client, backend, user: dict, token: str = "t1") -> None:
    """Put *token* in the browser's cookie jar and make the backend accept it."""
    backend.on("GET", "/api/users/me", 200, user)
    client.set_cookie("jwt_token", token)


@pytest.fixture
def as_admin(client, backend):
    sign_in(client, backend, ADMIN)
    return client


@pytest.fixture
def as_student(client, backend):
    sign_in(client, backend, STUDENT)
    return client
