import logging
import os

import requests
from flask import Flask, g, redirect, request, session

from quizweb.config import config_map
from quizweb.navigation import forget_stale_state, navigate
from quizweb.services.api_client import ApiClient, SessionExpired
from quizweb.services.auth_client import AuthClient
from quizweb.services.auth_state import AuthState
from quizweb.services.token_store import CookieTokenStore
from quizweb.utils.logging_config import configure_logging

log = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired. Please sign in again."


def create_app(env: str = None, http=None) -> Flask:
    """
    Build the web frontend.

    *http* is the transport used to reach the REST backend (a
    ``requests.Session`` by default); every request handled by the app shares it.
    """
    app = Flask(__name__)

    env = env or os.getenv("FLASK_ENV", "development")
    app.config.from_object(config_map.get(env, config_map["default"]))
    configure_logging(app.config["LOG_LEVEL"])

    app.extensions["quizweb.http"] = http or requests.Session()

    # ── Auth initialization gate ─────────────────────────────────────────────
    @app.before_request
    def load_auth_state():
        if request.endpoint == "static":
            return None
        g.token_store = CookieTokenStore(
            request.cookies,
            name=app.config["TOKEN_COOKIE_NAME"],
            max_age_days=app.config["TOKEN_COOKIE_MAX_AGE_DAYS"],
            secure=app.config["TOKEN_COOKIE_SECURE"],
        )
        g.api = ApiClient(
            app.config["API_BASE_URL"],
            g.token_store,
            http=app.extensions["quizweb.http"],
            timeout=app.config["API_TIMEOUT"],
        )
        g.auth = AuthState(AuthClient(g.api, g.token_store))
        g.auth.check_auth()
        return None

    @app.before_request
    def drop_stale_state():
        if request.endpoint in (None, "static"):
            return None
        forget_stale_state(request.path, request.endpoint, g.auth.is_authenticated)
        return None

    @app.after_request
    def flush_token_cookie(response):
        store = g.get("token_store")
        if store is not None:
            store.apply(response)
        return response

    # ── Global error handling ────────────────────────────────────────────────
    @app.errorhandler(SessionExpired)
    def session_expired(exc):
        log.info("session expired on %s", request.path)
        auth = g.get("auth")
        if auth is not None:
            auth.set_user(None)
        session.clear()
        return navigate("/login", {"from": request.path, "error": SESSION_EXPIRED_MESSAGE})

    @app.errorhandler(404)
    def not_found(exc):
        return redirect("/login")

    # ── Blueprints ───────────────────────────────────────────────────────────
    from quizweb.views.admin import admin_bp
    from quizweb.views.auth import auth_bp
    from quizweb.views.root import root_bp
    from quizweb.views.student import student_bp

    app.register_blueprint(root_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(admin_bp)

    return app
