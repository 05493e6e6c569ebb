"""
Client-side form rules.

Each ``validate_*`` function returns a ``{field: message}`` dict; an empty
dict means the form may be sent to the backend.
"""
from __future__ import annotations

import re

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
NAME_RE = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")
PASSWORD_STRENGTH_RE = re.compile(r"^(?=.*[a-zA-Z])(?=.*\d)")

TITLE_MAX = 100
DESCRIPTION_MAX = 500
QUESTION_MIN = 5
QUESTION_MAX = 2000
ANSWER_MAX = 1000
MIN_ANSWERS = 2
MAX_ANSWERS = 6


def _check_email(email: str, errors: dict, max_length: int | None = None) -> None:
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Invalid email"
    elif max_length and len(email) > max_length:
        errors["email"] = f"Email cannot exceed {max_length} characters"


# ── Accounts ─────────────────────────────────────────────────────────────────

def validate_login(email: str, password: str) -> dict:
    errors: dict = {}
    _check_email(email.strip(), errors)
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    return errors


def validate_email(email: str) -> dict:
    errors: dict = {}
    _check_email(email.strip(), errors)
    return errors


def validate_registration(first_name: str, last_name: str, email: str, password: str) -> dict:
    errors: dict = {}
    for field, label, value in (
        ("first_name", "First name", first_name.strip()),
        ("last_name", "Last name", last_name.strip()),
    ):
        if not value:
            errors[field] = f"{label} is required"
        elif len(value) < 2:
            errors[field] = f"{label} must be at least 2 characters"
        elif len(value) > 255:
            errors[field] = f"{label} cannot exceed 255 characters"
        elif not NAME_RE.match(value):
            errors[field] = f"{label} may only contain letters, spaces, apostrophes and hyphens"

    _check_email(email.strip(), errors, max_length=180)

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    elif len(password) > 255:
        errors["password"] = "Password cannot exceed 255 characters"
    elif not PASSWORD_STRENGTH_RE.match(password):
        errors["password"] = "Password must contain at least one letter and one digit"
    return errors


def validate_password_reset(token: str, password: str, confirm: str) -> dict:
    errors: dict = {}
    if not token:
        errors["token"] = "Reset link is invalid or incomplete"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    elif password != confirm:
        errors["confirm"] = "Passwords do not match"
    return errors


# ── Quiz access ──────────────────────────────────────────────────────────────

def validate_participant(first_name: str, last_name: str, code: str) -> dict:
    errors: dict = {}
    for field, label, value, minimum, maximum in (
        ("first_name", "First name", first_name.strip(), 2, 50),
        ("last_name", "Last name", last_name.strip(), 2, 50),
        ("quiz_code", "Quiz code", code.strip(), 3, 20),
    ):
        if not value:
            errors[field] = f"{label} is required"
        elif len(value) < minimum:
            errors[field] = f"{label} must be at least {minimum} characters"
        elif len(value) > maximum:
            errors[field] = f"{label} cannot exceed {maximum} characters"
    return errors


# ── Authoring ────────────────────────────────────────────────────────────────

def validate_quiz(title: str, description: str) -> dict:
    errors: dict = {}
    if not title.strip():
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX:
        errors["title"] = f"Title cannot exceed {TITLE_MAX} characters"
    if len(description) > DESCRIPTION_MAX:
        errors["description"] = f"Description cannot exceed {DESCRIPTION_MAX} characters"
    return errors


def normalize_question_text(text: str) -> str:
    text = text.strip()
    if text and not text.endswith("?"):
        text += "?"
    return text


def validate_question(text: str, answers: list[tuple[str, bool]]) -> dict:
    """
    *answers* is a list of ``(text, is_correct)`` pairs, already in display
    order. The question text must already end with a question mark.
    """
    errors: dict = {}
    text = text.strip()
    if not text:
        errors["text"] = "Question text cannot be empty"
    elif len(text) < QUESTION_MIN:
        errors["text"] = f"Question must be at least {QUESTION_MIN} characters"
    elif len(text) > QUESTION_MAX:
        errors["text"] = f"Question cannot exceed {QUESTION_MAX} characters"
    elif not text.endswith("?"):
        errors["text"] = "A question must end with a question mark"

    if len(answers) < MIN_ANSWERS:
        errors["answers"] = f"A question needs at least {MIN_ANSWERS} answers"
    elif len(answers) > MAX_ANSWERS:
        errors["answers"] = f"A question cannot have more than {MAX_ANSWERS} answers"
    else:
        for i, (answer_text, _) in enumerate(answers, start=1):
            answer_text = answer_text.strip()
            if not answer_text:
                errors["answers"] = f"Answer {i} cannot be empty"
                break
            if len(answer_text) > ANSWER_MAX:
                errors["answers"] = f"Answer {i} cannot exceed {ANSWER_MAX} characters"
                break
        else:
            if not any(correct for _, correct in answers):
                errors["answers"] = "At least one answer must be marked correct"
    return errors
