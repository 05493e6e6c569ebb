"""
Account pages

Routes
------
GET/POST  /login             – sign in; returns to the page the guard stopped
GET/POST  /register          – create a student account
POST      /logout            – end the session
GET/POST  /forgot-password   – request a reset link
GET/POST  /reset-password    – choose a new password (token in the query string)
"""
from __future__ import annotations

import logging

from flask import Blueprint, g, redirect, render_template, request, session

from quizweb.auth.guard import LOGIN_PATH, home_for, post_login_target
from quizweb.navigation import navigate, pop_state
from quizweb.quiz.validation import (
    validate_email,
    validate_login,
    validate_password_reset,
    validate_registration,
)
from quizweb.services.api_client import APIError, error_message

log = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

_REGISTER_MESSAGES = {
    0: "Could not reach the server. Please try again.",
    400: "Invalid data. Check your input.",
    404: "Registration is not available right now.",
    409: "This email is already used by another account.",
    500: "Internal server error. Please try again later.",
}


# ── Login ─────────────────────────────────────────────────────────────────────

@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    auth = g.auth

    if request.method == "GET":
        if auth.is_authenticated:
            return redirect(home_for(auth.roles))
        state = pop_state(LOGIN_PATH) or {}
        return render_template(
            "auth/login.html",
            email="",
            next_path=state.get("from") or "",
            notice=state.get("error"),
            success=state.get("success"),
            errors={},
        )

    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    next_path = request.form.get("next") or ""

    errors = validate_login(email, password)
    if not errors and not auth.login(email, password):
        errors["form"] = auth.error
    if errors:
        return render_template(
            "auth/login.html",
            email=email,
            next_path=next_path,
            notice=None,
            success=None,
            errors=errors,
        )
    return redirect(post_login_target(next_path, auth.roles))


@auth_bp.post("/logout")
def logout():
    g.auth.logout()
    session.clear()
    return redirect(LOGIN_PATH)


# ── Register ──────────────────────────────────────────────────────────────────

@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    form = {
        "first_name": (request.form.get("first_name") or "").strip(),
        "last_name": (request.form.get("last_name") or "").strip(),
        "email": (request.form.get("email") or "").strip(),
    }
    if request.method == "GET":
        return render_template("auth/register.html", form=form, errors={})

    password = request.form.get("password") or ""
    errors = validate_registration(form["first_name"], form["last_name"], form["email"], password)
    if not errors:
        try:
            g.auth.client.register(form["first_name"], form["last_name"], form["email"], password)
        except APIError as exc:
            log.info("registration rejected (%s): %s", exc.status_code, exc)
            errors["email"] = error_message(exc, _REGISTER_MESSAGES, default="Could not create the account")
    if errors:
        return render_template("auth/register.html", form=form, errors=errors)

    return navigate(LOGIN_PATH, {"success": "Account created. You can now sign in."})


# ── Password reset ────────────────────────────────────────────────────────────

@auth_bp.route("/forgot-password", methods=["GET", "POST"])
def forgot_password():
    email = (request.form.get("email") or "").strip()
    if request.method == "GET":
        return render_template("auth/forgot_password.html", email="", errors={}, success=None)

    errors = validate_email(email)
    success = None
    if not errors:
        try:
            result = g.auth.client.forgot_password(email)
            success = result.get("message") or "If this address exists, a reset email has been sent."
            email = ""
        except APIError as exc:
            errors["form"] = error_message(exc, default="Something went wrong")
    return render_template("auth/forgot_password.html", email=email, errors=errors, success=success)


@auth_bp.route("/reset-password", methods=["GET", "POST"])
def reset_password():
    token = request.values.get("token") or ""
    if request.method == "GET":
        return render_template("auth/reset_password.html", token=token, errors={})

    password = request.form.get("password") or ""
    confirm = request.form.get("confirm") or ""
    errors = validate_password_reset(token, password, confirm)
    if not errors:
        try:
            g.auth.client.reset_password(token, password)
        except APIError as exc:
            errors["form"] = error_message(exc, default="Something went wrong")
    if errors:
        return render_template("auth/reset_password.html", token=token, errors=errors)
    return navigate(
        LOGIN_PATH,
        {"success": "Your password has been reset. You can now sign in with your new password."},
    )
