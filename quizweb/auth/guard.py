"""
Route protection.

``resolve_access`` is the whole decision as a pure function so it can be
tested without a request; ``protected`` applies it to a Flask view.

Decision table for an authenticated user lacking ``required_role``:

    admin                          → /admin
    student, not on /student       → /student
    student, already on /student   → /login   (never redirect to self)
    anyone else                    → /login
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps

from flask import g, request

from quizweb.models.user import Role
from quizweb.navigation import navigate

log = logging.getLogger(__name__)

LOGIN_PATH = "/login"
ADMIN_HOME = "/admin"
STUDENT_HOME = "/student"

SIGN_IN_REQUIRED = "Please sign in to access this page"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Redirect:
    target: str
    reason: str


def resolve_access(
    is_authenticated: bool,
    roles,
    required_role: Role | str | None,
    current_path: str,
    redirect_to: str = LOGIN_PATH,
) -> Allow | Redirect:
    if not is_authenticated:
        return Redirect(redirect_to, SIGN_IN_REQUIRED)

    if required_role is None:
        return Allow()

    required = required_role if isinstance(required_role, Role) else Role.parse(required_role)
    roles = frozenset(roles or ())
    if required is not None and required in roles:
        return Allow()

    label = required.value if required is not None else str(required_role)
    reason = f"Access denied. Required role: {label}"
    if Role.ADMIN in roles:
        return Redirect(ADMIN_HOME, reason)
    if Role.USER in roles:
        target = LOGIN_PATH if current_path == STUDENT_HOME else STUDENT_HOME
        return Redirect(target, reason)
    return Redirect(LOGIN_PATH, reason)


def protected(required_role: Role | str | None = None, redirect_to: str = LOGIN_PATH):
    """Render the view only when ``resolve_access`` allows it, else redirect."""

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            auth = g.auth
            decision = resolve_access(
                auth.is_authenticated,
                auth.roles,
                required_role,
                request.path,
                redirect_to,
            )
            if isinstance(decision, Redirect):
                log.debug("guard: %s → %s (%s)", request.path, decision.target, decision.reason)
                return navigate(
                    decision.target,
                    {"from": request.full_path.rstrip("?"), "error": decision.reason},
                )
            return view(*args, **kwargs)

        return wrapped

    return decorator


def home_for(roles) -> str:
    """Landing page for a signed-in user: admins go to /admin, everyone else to /student."""
    return ADMIN_HOME if Role.ADMIN in frozenset(roles or ()) else STUDENT_HOME


def post_login_target(attempted: str | None, roles) -> str:
    """
    Where to send a user right after signing in.

    Back to the page they were stopped at, unless that page belongs to a
    role they do not have.
    """
    roles = frozenset(roles or ())
    is_admin = Role.ADMIN in roles
    is_student = Role.USER in roles
    if not attempted or not attempted.startswith("/") or attempted.startswith("//"):
        return home_for(roles)
    if attempted.startswith(LOGIN_PATH):
        return home_for(roles)
    if attempted.startswith(ADMIN_HOME) and not is_admin:
        return home_for(roles)
    if attempted.startswith(STUDENT_HOME) and not is_student and not is_admin:
        return home_for(roles)
    return attempted
