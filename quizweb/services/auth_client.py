"""
Talks to the backend's authentication endpoints.

Endpoints
---------
POST  /api/login_check            – exchange {username, password} for {token}
POST  /api/logout                 – best-effort server notification
GET   /api/users/me               – the user behind the current token
POST  /api/users/register         – create a student account
POST  /api/mail/forgot-password   – send a reset link
POST  /api/mail/reset-password    – set a new password from a reset token

"Authenticated" means the backend currently accepts the stored token and
returns a user; the token is never decoded locally.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from quizweb.models.user import Role, User
from quizweb.services.api_client import APIError, SessionExpired, error_message

log = logging.getLogger(__name__)

_LOGIN_MESSAGES = {
    0: "Network error. Check your connection.",
    500: "Internal server error. Please try again later.",
}


@dataclass(frozen=True)
class LoginResult:
    success: bool
    message: str
    token: str | None = None


class AuthClient:
    def __init__(self, api, token_store):
        self.api = api
        self.token_store = token_store

    # ── Session ──────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> LoginResult:
        try:
            data = self.api.post("/api/login_check", {"username": email, "password": password})
        except SessionExpired as exc:
            return LoginResult(False, str(exc))
        except APIError as exc:
            if isinstance(exc.data, dict):
                return LoginResult(False, str(exc))
            return LoginResult(False, error_message(exc, _LOGIN_MESSAGES, default="Login failed"))

        token = (data or {}).get("token")
        if not token:
            return LoginResult(False, "Login failed")
        self.token_store.set(token)
        return LoginResult(True, "Signed in", token)

    def logout(self) -> None:
        try:
            self.api.post("/api/logout")
        except (APIError, SessionExpired) as exc:
            log.debug("logout notification failed: %s", exc)
        finally:
            self.token_store.clear()

    def get_current_user(self) -> User | None:
        if not self.token_store.get():
            return None
        try:
            data = self.api.get("/api/users/me")
        except SessionExpired:
            # the api client has already cleared the token
            return None
        except APIError as exc:
            log.warning("could not fetch current user: %s", exc)
            return None
        if not data:
            return None
        try:
            return User.from_api(data)
        except (KeyError, TypeError) as exc:
            log.warning("malformed /api/users/me payload: %s", exc)
            return None

    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None

    def has_role(self, role: Role | str) -> bool:
        user = self.get_current_user()
        return user is not None and user.has_role(role)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def is_student(self) -> bool:
        return self.has_role(Role.USER)

    def get_token(self) -> str | None:
        return self.token_store.get()

    # ── Accounts ─────────────────────────────────────────────────────────────

    def register(self, first_name: str, last_name: str, email: str, password: str) -> dict:
        return self.api.post(
            "/api/users/register",
            {
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
            },
        ) or {}

    def forgot_password(self, email: str) -> dict:
        return self.api.post("/api/mail/forgot-password", {"email": email}) or {}

    def reset_password(self, token: str, password: str) -> dict:
        return self.api.post("/api/mail/reset-password", {"token": token, "password": password}) or {}
