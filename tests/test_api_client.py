import pytest
import requests

from conftest import FakeBackend, FakeResponse
from quizweb.services.api_client import (
    NETWORK_ERROR_MESSAGE,
    APIError,
    ApiClient,
    SessionExpired,
    error_message,
)
from quizweb.services.token_store import CookieTokenStore


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store():
    return CookieTokenStore({"jwt_token": "t1"})


@pytest.fixture
def api(backend, store):
    return ApiClient("http://backend.test/", store, http=backend, timeout=3)


def test_sends_bearer_token_and_json_content_type(api, backend):
    backend.on("GET", "/api/questionnaires", 200, [])
    assert api.get("/api/questionnaires") == []

    call = backend.calls[0]
    assert call.headers["Authorization"] == "Bearer t1"
    assert call.headers["Content-Type"] == "application/json"


def test_no_authorization_header_without_token(backend):
    api = ApiClient("http://backend.test", CookieTokenStore({}), http=backend)
    backend.on("POST", "/api/login_check", 200, {"token": "x"})
    api.post("/api/login_check", {"username": "a@b.com", "password": "secret1"})
    assert "Authorization" not in backend.calls[0].headers
    assert backend.calls[0].json == {"username": "a@b.com", "password": "secret1"}


def test_401_clears_token_and_raises_session_expired(api, backend, store):
    backend.on("GET", "/api/users/me", 401, {"message": "Expired JWT Token"})
    with pytest.raises(SessionExpired, match="Expired JWT Token"):
        api.get("/api/users/me")
    assert store.get() is None


def test_session_expired_is_not_an_api_error():
    assert not issubclass(SessionExpired, APIError)


def test_error_status_raises_api_error_with_body(api, backend):
    backend.on("DELETE", "/api/questionnaires/7", 500, {"message": "boom"})
    with pytest.raises(APIError) as info:
        api.delete("/api/questionnaires/7")
    assert info.value.status_code == 500
    assert info.value.data == {"message": "boom"}
    assert str(info.value) == "boom"


def test_network_failure_becomes_status_zero(api, backend):
    def unreachable(call):
        raise requests.ConnectionError("refused")

    backend.on("GET", "/api/questionnaires", handler=unreachable)
    with pytest.raises(APIError) as info:
        api.get("/api/questionnaires")
    assert info.value.status_code == 0
    assert str(info.value) == NETWORK_ERROR_MESSAGE


def test_empty_body_returns_none(api, backend):
    backend.on("DELETE", "/api/questionnaires/3", handler=lambda call: FakeResponse(204))
    assert api.delete("/api/questionnaires/3") is None


class TestErrorMessage:
    def test_override_wins(self):
        assert error_message(APIError("x", 500), {500: "Delete failed"}) == "Delete failed"

    def test_network(self):
        assert error_message(APIError("x", 0)) == NETWORK_ERROR_MESSAGE

    def test_violations_are_joined(self):
        exc = APIError("x", 422, {"violations": [{"message": "Title too long"}, {"message": "Bad code"}]})
        assert error_message(exc) == "Title too long, Bad code"

    def test_known_status(self):
        assert error_message(APIError("x", 409)) == "This resource already exists."

    def test_unknown_status_uses_default(self):
        assert error_message(APIError("teapot", 418), default="Something went wrong") == "Something went wrong"
