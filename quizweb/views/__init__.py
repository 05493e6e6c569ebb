from flask import current_app, flash, g

from quizweb.navigation import pop_state
from quizweb.services.ai import AIService
from quizweb.services.quizzes import QuizService


def quiz_service() -> QuizService:
    return QuizService(g.api)


def ai_service() -> AIService:
    return AIService(g.api)


def default_passing_score() -> int:
    return current_app.config["DEFAULT_PASSING_SCORE"]


def flash_guard_notice(path: str) -> None:
    """Show the reason a guard redirect landed the user on *path*."""
    state = pop_state(path) or {}
    if state.get("error"):
        flash(state["error"], "error")
