"""
Single HTTP client for all quizweb → REST backend communication.

Every request carries the bearer token held by the token store. A 401 from
any endpoint tears the session down (token cleared) and raises
SessionExpired, which the app turns into a redirect to the login page.
"""
from __future__ import annotations

import logging

import requests

log = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Check your connection."

_STATUS_MESSAGES = {
    400: "Invalid data. Check your input.",
    403: "You are not allowed to perform this action.",
    404: "Resource not found.",
    409: "This resource already exists.",
    422: "Invalid data. Check your input.",
    500: "Internal server error. Please try again later.",
}


class APIError(Exception):
    def __init__(self, message: str, status_code: int = 0, data=None):
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class SessionExpired(Exception):
    """The backend rejected the bearer token; the session has been cleared."""


def _body(resp: requests.Response):
    try:
        return resp.json()
    except ValueError:
        return None


def _message_from(data, fallback: str) -> str:
    if isinstance(data, dict):
        violations = data.get("violations")
        if violations:
            return ", ".join(v.get("message", "") for v in violations if isinstance(v, dict))
        for key in ("message", "error", "detail"):
            if data.get(key):
                return str(data[key])
    return fallback


def error_message(exc: APIError, overrides: dict | None = None, default: str | None = None) -> str:
    """
    Map an APIError to the message shown to the user.

    *overrides* maps status codes to page-specific wording. 422 responses
    surface the backend's validation violations when there are any.
    """
    status = exc.status_code
    if overrides and status in overrides:
        return overrides[status]
    if status == 0:
        return NETWORK_ERROR_MESSAGE
    if status == 422 and isinstance(exc.data, dict) and exc.data.get("violations"):
        return _message_from(exc.data, _STATUS_MESSAGES[422])
    if status in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status]
    return default or str(exc) or "Unexpected error."


class ApiClient:
    def __init__(self, base_url: str, token_store, http=None, timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.http = http or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict:
        h = {"Content-Type": "application/json"}
        token = self.token_store.get()
        if token:
            h["Authorization"] = f"Bearer {token}"
        return h

    def _raise(self, resp: requests.Response) -> None:
        if resp.status_code == 401:
            log.info("backend returned 401, clearing session")
            self.token_store.clear()
            raise SessionExpired(_message_from(_body(resp), "Invalid credentials or expired session."))
        if not resp.ok:
            data = _body(resp)
            raise APIError(_message_from(data, resp.text or f"HTTP {resp.status_code}"), resp.status_code, data)

    def request(self, method: str, path: str, *, json=None, params=None):
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise APIError(NETWORK_ERROR_MESSAGE, 0) from exc
        self._raise(resp)
        if resp.status_code == 204 or not resp.content:
            return None
        return _body(resp)

    # ── Convenience verbs ────────────────────────────────────────────────────

    def get(self, path: str, params: dict | None = None):
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: dict | None = None):
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: dict):
        return self.request("PUT", path, json=payload)

    def delete(self, path: str):
        return self.request("DELETE", path)
