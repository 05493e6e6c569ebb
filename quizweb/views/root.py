from flask import Blueprint, g, redirect

from quizweb.auth.guard import LOGIN_PATH, home_for

root_bp = Blueprint("root", __name__)


@root_bp.get("/")
def index():
    """Send signed-in users to their dashboard, everyone else to the login page."""
    if not g.auth.is_authenticated:
        return redirect(LOGIN_PATH)
    return redirect(home_for(g.auth.roles))
