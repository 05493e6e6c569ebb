"""
One-shot payloads handed from one page to the next.

``navigate`` stores a payload in the session and redirects; the target page
reads it back with ``pop_state`` (consumed) or ``peek_state`` (kept while the
browser stays on that page). The payload lives only until it is consumed,
overwritten, or the browser moves to another page.

The running quiz attempt and the AI drafts are kept in the session the same
way; ``forget_stale_state`` drops whatever no longer belongs to the page
being requested.
"""
from __future__ import annotations

from flask import redirect, session

_STATE_KEY = "nav_state"
ATTEMPT_KEY = "attempt"
DRAFTS_KEY = "ai_drafts"

# Endpoint that owns the running attempt
ATTEMPT_ENDPOINT = "student.take_quiz"


def navigate(path: str, state: dict | None = None):
    if state is None:
        session.pop(_STATE_KEY, None)
    else:
        session[_STATE_KEY] = {"path": path.split("?", 1)[0], "data": state}
    return redirect(path)


def _stored(path: str) -> dict | None:
    stored = session.get(_STATE_KEY)
    if not stored or stored.get("path") != path:
        return None
    return stored.get("data")


def peek_state(path: str) -> dict | None:
    return _stored(path)


def pop_state(path: str) -> dict | None:
    data = _stored(path)
    if data is not None:
        session.pop(_STATE_KEY, None)
    return data


def _drop(*keys: str) -> None:
    for key in keys:
        if key in session:
            session.pop(key)


def forget_stale_state(path: str, endpoint: str | None, signed_in: bool) -> None:
    """
    Drop a payload addressed to another page, and the running attempt
    anywhere but the quiz page. Signed out, no attempt or draft survives.
    """
    stored = session.get(_STATE_KEY)
    if stored and stored.get("path") != path:
        _drop(_STATE_KEY)
    if not signed_in:
        _drop(ATTEMPT_KEY, DRAFTS_KEY)
    elif endpoint != ATTEMPT_ENDPOINT:
        _drop(ATTEMPT_KEY)
