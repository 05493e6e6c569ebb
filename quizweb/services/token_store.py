"""
Cookie-backed storage for the backend bearer token.

The token is read from the incoming request's cookies; writes are buffered
and flushed onto the outgoing response by ``apply()`` (wired into
``after_request`` by the app factory).
"""
from __future__ import annotations

from datetime import timedelta

_UNSET = object()


class CookieTokenStore:
    def __init__(
        self,
        cookies,
        name: str = "jwt_token",
        max_age_days: int = 7,
        secure: bool = False,
    ):
        self.name = name
        self.max_age = timedelta(days=max_age_days)
        self.secure = secure
        self._incoming = cookies.get(name) or None
        self._pending = _UNSET

    def get(self) -> str | None:
        if self._pending is not _UNSET:
            return self._pending
        return self._incoming

    def set(self, token: str) -> None:
        self._pending = token

    def clear(self) -> None:
        self._pending = None

    @property
    def dirty(self) -> bool:
        return self._pending is not _UNSET

    def apply(self, response):
        """Write the buffered change (if any) to *response* as Set-Cookie."""
        if self._pending is _UNSET:
            return response
        if self._pending is None:
            if self._incoming is not None:
                response.delete_cookie(
                    self.name,
                    path="/",
                    secure=self.secure,
                    httponly=True,
                    samesite="Lax",
                )
        else:
            response.set_cookie(
                self.name,
                self._pending,
                max_age=self.max_age,
                path="/",
                secure=self.secure,
                httponly=True,
                samesite="Lax",
            )
        return response
