from quizweb.auth.guard import (
    Allow,
    Redirect,
    home_for,
    post_login_target,
    protected,
    resolve_access,
)

__all__ = [
    "Allow",
    "Redirect",
    "home_for",
    "post_login_target",
    "protected",
    "resolve_access",
]
