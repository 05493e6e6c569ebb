"""
The authentication state every page reads.

One AuthState is built per request and kept on ``flask.g``; views never talk
to the AuthClient for role checks, they read the cached user here.
"""
from __future__ import annotations

import logging

from quizweb.models.user import Role, User

log = logging.getLogger(__name__)


class AuthState:
    def __init__(self, client):
        self.client = client
        self.user: User | None = None
        self.is_authenticated = False
        self.is_loading = False
        self.is_initialized = False
        self.error: str | None = None

    def _reset(self, error: str | None = None) -> None:
        self.user = None
        self.is_authenticated = False
        self.is_loading = False
        self.error = error

    def set_user(self, user: User | None) -> None:
        self.user = user
        self.is_authenticated = user is not None
        self.error = None

    # ── Actions ──────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> bool:
        self.is_loading = True
        self.error = None

        result = self.client.login(email, password)
        if not result.success:
            self._reset(error=result.message)
            return False

        user = self.client.get_current_user()
        if user is None:
            self._reset(error="Could not load your account. Please try again.")
            return False
        self.user = user
        self.is_authenticated = True
        self.is_loading = False
        log.info("user %s signed in", user.email)
        return True

    def logout(self) -> None:
        self.is_loading = True
        try:
            self.client.logout()
        finally:
            self._reset()

    def check_auth(self) -> bool:
        self.is_loading = True
        try:
            if self.client.is_authenticated():
                user = self.client.get_current_user()
                self.set_user(user)
                self.is_loading = False
                return user is not None
            self._reset()
            return False
        finally:
            self.is_initialized = True

    def clear_error(self) -> None:
        self.error = None

    # ── Role predicates (cached user, no network) ────────────────────────────

    def has_role(self, role: Role | str) -> bool:
        return self.user is not None and self.user.has_role(role)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def is_student(self) -> bool:
        return self.has_role(Role.USER)

    @property
    def roles(self) -> frozenset[Role]:
        return self.user.roles if self.user else frozenset()
