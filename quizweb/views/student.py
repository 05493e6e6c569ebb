"""
Student pages

Routes
------
GET/POST  /student           – join a quiz with an access code
GET/POST  /take-quiz         – answer the questions one by one, then submit
GET       /quiz-results      – score of the attempt just submitted
GET       /student-history   – past attempts, with per-question details

All routes require ROLE_USER.
"""
from __future__ import annotations

import logging

from flask import Blueprint, flash, g, redirect, render_template, request, session, url_for

from quizweb.auth.guard import STUDENT_HOME, protected
from quizweb.models.attempt import AttemptDetail
from quizweb.models.user import Role
from quizweb.navigation import ATTEMPT_KEY, navigate, peek_state, pop_state
from quizweb.quiz.attempt import AttemptError, QuizAttempt, Step
from quizweb.quiz.results import ResultSummary, filter_history, summarize_details, summarize_submission
from quizweb.quiz.validation import validate_participant
from quizweb.services.api_client import APIError, error_message
from quizweb.views import default_passing_score, flash_guard_notice, quiz_service

log = logging.getLogger(__name__)

student_bp = Blueprint("student", __name__)

TAKE_QUIZ_PATH = "/take-quiz"
RESULTS_PATH = "/quiz-results"


# ── Student home: join a quiz ─────────────────────────────────────────────────

@student_bp.route("/student", methods=["GET", "POST"])
@protected(required_role=Role.USER)
def home():
    user = g.auth.user
    if request.method == "GET":
        flash_guard_notice(STUDENT_HOME)
        form = {
            "first_name": user.first_name or "",
            "last_name": user.last_name or "",
            "quiz_code": "",
        }
        return render_template("student/home.html", form=form, errors={})

    form = {
        "first_name": (request.form.get("first_name") or "").strip(),
        "last_name": (request.form.get("last_name") or "").strip(),
        "quiz_code": (request.form.get("quiz_code") or "").strip().upper(),
    }
    errors = validate_participant(form["first_name"], form["last_name"], form["quiz_code"])
    if errors:
        return render_template("student/home.html", form=form, errors=errors)

    try:
        quiz = quiz_service().find_by_access_code(form["quiz_code"])
    except APIError as exc:
        if exc.status_code == 404:
            errors["quiz_code"] = "No quiz found with this access code"
        elif exc.status_code == 403:
            errors["quiz_code"] = "This quiz is not available"
        else:
            log.warning("quiz lookup for %s failed: %s", form["quiz_code"], exc)
            flash(error_message(exc, default="Error while looking up the quiz"), "error")
        return render_template("student/home.html", form=form, errors=errors)

    if not quiz.is_active:
        errors["quiz_code"] = "This quiz is not active right now"
        return render_template("student/home.html", form=form, errors=errors)

    session.pop(ATTEMPT_KEY, None)
    return navigate(
        TAKE_QUIZ_PATH,
        {
            "participant": {
                "first_name": form["first_name"],
                "last_name": form["last_name"],
                "quiz_code": form["quiz_code"],
            },
            "quiz": quiz.to_state(),
        },
    )


# ── Taking a quiz ─────────────────────────────────────────────────────────────

def _leave(message: str):
    session.pop(ATTEMPT_KEY, None)
    flash(message, "error")
    return redirect(STUDENT_HOME)


def _load_attempt() -> QuizAttempt | None:
    """
    Rebuild the running attempt, or start one from the navigation state
    handed over by the student home. Returns None when there is nothing to
    take; raises APIError when the questions cannot be loaded.
    """
    state = pop_state(TAKE_QUIZ_PATH)
    progress = session.get(ATTEMPT_KEY)
    if state is None and progress is None:
        return None

    quiz_state = state["quiz"] if state else progress["quiz"]
    quiz = quiz_service().get_public_quiz(quiz_state["id"])
    if state:
        return QuizAttempt.start(quiz_state, state["participant"], quiz.questions)
    return QuizAttempt.restore(progress, quiz.questions)


def _save(attempt: QuizAttempt) -> None:
    session[ATTEMPT_KEY] = attempt.to_progress()


@student_bp.route(TAKE_QUIZ_PATH, methods=["GET", "POST"])
@protected(required_role=Role.USER)
def take_quiz():
    try:
        attempt = _load_attempt()
    except APIError as exc:
        log.warning("could not load quiz questions: %s", exc)
        return _leave("Error while loading the quiz")
    except AttemptError as exc:
        return _leave(str(exc))
    if attempt is None:
        return _leave("Missing quiz data")

    if request.method == "GET":
        _save(attempt)
        return render_template("student/take_quiz.html", attempt=attempt)

    action = request.form.get("action")
    if action == "leave":
        session.pop(ATTEMPT_KEY, None)
        return redirect(STUDENT_HOME)

    if action == "select":
        try:
            attempt.select(int(request.form.get("answer_id", "")))
        except (ValueError, AttemptError) as exc:
            log.debug("ignored selection: %s", exc)
    elif action == "previous":
        attempt.previous()
    elif action == "next":
        step = attempt.next()
        if step is Step.SUBMIT:
            return _submit(attempt)
        if step is Step.BLOCKED:
            flash("Select an answer before continuing", "error")

    _save(attempt)
    return redirect(url_for("student.take_quiz"))


def _submit(attempt: QuizAttempt):
    try:
        answers = attempt.begin_submission()
    except AttemptError as exc:
        log.debug("submission refused: %s", exc)
        return redirect(url_for("student.take_quiz"))

    participant = attempt.participant
    quiz = attempt.quiz
    try:
        response = quiz_service().submit_attempt(
            quiz["id"],
            participant["first_name"],
            participant["last_name"],
            answers,
        )
    except APIError as exc:
        log.warning("submission of quiz %s failed: %s", quiz["id"], exc)
        attempt.fail_submission()
        _save(attempt)
        flash("Error while submitting the quiz", "error")
        return redirect(url_for("student.take_quiz"))

    summary = summarize_submission(
        response,
        len(attempt.questions),
        quiz.get("passing_score"),
        default_passing_score(),
    )
    attempt.complete()
    session.pop(ATTEMPT_KEY, None)
    log.info("attempt %s submitted for quiz %s", response.get("tentativeId"), quiz["id"])
    return navigate(
        RESULTS_PATH,
        {
            "quiz": quiz,
            "result": summary.to_dict(),
            "attempt_id": response.get("tentativeId"),
        },
    )


# ── Results ───────────────────────────────────────────────────────────────────

@student_bp.get(RESULTS_PATH)
@protected(required_role=Role.USER)
def quiz_results():
    state = peek_state(RESULTS_PATH)
    if not state or not state.get("quiz"):
        return redirect(STUDENT_HOME)

    quiz = state["quiz"]
    summary = ResultSummary.from_dict(state["result"])
    details: list[AttemptDetail] = []

    attempt_id = state.get("attempt_id")
    if attempt_id:
        try:
            data = quiz_service().get_attempt_result(attempt_id)
        except APIError as exc:
            log.warning("could not load result of attempt %s: %s", attempt_id, exc)
            flash("Error while loading your results", "error")
            return redirect(STUDENT_HOME)
        details = [AttemptDetail.from_result(r) for r in data.get("resultats") or []]
        if details:
            summary = summarize_details(
                details,
                data.get("score"),
                quiz.get("passing_score"),
                default_passing_score(),
            )

    return render_template("student/results.html", quiz=quiz, summary=summary, details=details)


# ── History ───────────────────────────────────────────────────────────────────

@student_bp.get("/student-history")
@protected(required_role=Role.USER)
def history():
    service = quiz_service()
    try:
        attempts = service.list_history()
    except APIError as exc:
        log.warning("could not load history: %s", exc)
        return render_template(
            "student/history.html",
            error="Error while loading your quiz history",
            attempts=[],
            all_count=0,
            term="",
            selected=None,
            details=[],
        )

    if not attempts:
        flash("You have not taken any quiz yet", "info")

    term = request.args.get("q", "")
    selected = None
    details: list[AttemptDetail] = []
    selected_id = request.args.get("attempt", type=int)
    if selected_id is not None:
        selected = next((a for a in attempts if a.id == selected_id), None)
        if selected is not None:
            try:
                details = service.get_history_details(selected_id)
            except APIError as exc:
                log.warning("could not load attempt %s: %s", selected_id, exc)
                flash("Error while loading the attempt details", "error")

    return render_template(
        "student/history.html",
        error=None,
        attempts=filter_history(attempts, term),
        all_count=len(attempts),
        term=term,
        selected=selected,
        details=details,
    )
