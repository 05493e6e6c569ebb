"""
Admin pages

Routes
------
GET       /admin                                       – quiz dashboard
POST      /admin/quizzes/<id>/toggle                   – activate / deactivate
POST      /admin/quizzes/<id>/delete                   – delete a quiz
GET       /admin/quizzes/<id>/results                  – open the results page
GET/POST  /create-quiz                                 – new quiz
GET       /manage-questions/<id>                       – questions of a quiz
POST      /manage-questions/<id>/questions             – add a question
POST      /manage-questions/<id>/questions/<qid>       – edit a question
POST      /manage-questions/<id>/generate              – AI drafts from a text
POST      /manage-questions/<id>/generate/add          – keep selected drafts
POST      /manage-questions/<id>/generate/discard      – drop the drafts
GET       /quiz-results-detail                         – attempts on one quiz

All routes require ROLE_ADMIN.
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for

from quizweb.auth.guard import ADMIN_HOME, protected
from quizweb.models.attempt import AttemptDetail
from quizweb.models.quiz import Answer, Question, Quiz
from quizweb.models.user import Role
from quizweb.navigation import DRAFTS_KEY, navigate, peek_state
from quizweb.quiz.board import QuizBoard
from quizweb.quiz.results import calculate_metrics, filter_students, participant_email
from quizweb.quiz.validation import MAX_ANSWERS, normalize_question_text, validate_question, validate_quiz
from quizweb.services.ai import to_questions
from quizweb.services.api_client import APIError, error_message
from quizweb.views import ai_service, flash_guard_notice, quiz_service

log = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)

RESULTS_DETAIL_PATH = "/quiz-results-detail"

AI_MAX_QUESTIONS = 10

_CREATE_MESSAGES = {
    403: "You do not have permission to create a quiz",
}


# ── Dashboard ─────────────────────────────────────────────────────────────────

def _dashboard(board: QuizBoard, error: str | None = None):
    return render_template("admin/dashboard.html", board=board, error=error)


@admin_bp.get(ADMIN_HOME)
@protected(required_role=Role.ADMIN)
def dashboard():
    flash_guard_notice(ADMIN_HOME)
    board = QuizBoard(quiz_service())
    return _dashboard(board, board.load())


def _board_action(action):
    """Run *action* on a freshly loaded board, then redirect back to the dashboard."""
    board = QuizBoard(quiz_service())
    error = board.load()
    if error:
        flash(error, "error")
    else:
        ok, message = action(board)
        flash(message, "success" if ok else "error")
    return redirect(ADMIN_HOME)


@admin_bp.post("/admin/quizzes/<int:quiz_id>/toggle")
@protected(required_role=Role.ADMIN)
def toggle_quiz(quiz_id: int):
    return _board_action(lambda board: board.toggle(quiz_id))


@admin_bp.post("/admin/quizzes/<int:quiz_id>/delete")
@protected(required_role=Role.ADMIN)
def delete_quiz(quiz_id: int):
    return _board_action(lambda board: board.delete(quiz_id))


@admin_bp.get("/admin/quizzes/<int:quiz_id>/results")
@protected(required_role=Role.ADMIN)
def open_results(quiz_id: int):
    return navigate(
        RESULTS_DETAIL_PATH,
        {
            "quiz_id": quiz_id,
            "title": request.args.get("title", ""),
            "code": request.args.get("code", ""),
        },
    )


# ── Create a quiz ─────────────────────────────────────────────────────────────

@admin_bp.route("/create-quiz", methods=["GET", "POST"])
@protected(required_role=Role.ADMIN)
def create_quiz():
    form = {
        "title": (request.form.get("title") or "").strip(),
        "description": (request.form.get("description") or "").strip(),
    }
    if request.method == "GET":
        return render_template("admin/create_quiz.html", form=form, errors={})

    errors = validate_quiz(form["title"], form["description"])
    if errors:
        return render_template("admin/create_quiz.html", form=form, errors=errors)

    try:
        quiz = quiz_service().create_quiz(
            form["title"],
            form["description"],
            current_app.config["NEW_QUIZ_PASSING_SCORE"],
        )
    except APIError as exc:
        log.warning("quiz creation failed (%s): %s", exc.status_code, exc)
        errors["form"] = error_message(exc, _CREATE_MESSAGES, default="Error while creating the quiz")
        return render_template("admin/create_quiz.html", form=form, errors=errors)

    log.info("quiz %s created with code %s", quiz.id, quiz.access_code)
    flash(f"Quiz created. Access code: {quiz.access_code}", "success")
    return redirect(url_for("admin.manage_questions", quiz_id=quiz.id))


# ── Manage questions ──────────────────────────────────────────────────────────

def _answers_from_form() -> list[Answer]:
    """
    Answer rows posted as parallel ``answer_text`` / ``answer_id`` lists with
    ``answer_correct`` holding the indexes of the ticked rows. Rows left
    blank and unticked are dropped.
    """
    texts = request.form.getlist("answer_text")
    ids = request.form.getlist("answer_id")
    correct = set(request.form.getlist("answer_correct"))
    answers = []
    for i, text in enumerate(texts):
        is_correct = str(i) in correct
        if not text.strip() and not is_correct:
            continue
        raw_id = ids[i] if i < len(ids) else ""
        answers.append(
            Answer(
                id=int(raw_id) if raw_id.isdigit() else None,
                text=text.strip(),
                order=len(answers) + 1,
                is_correct=is_correct,
            )
        )
    return answers


def _question_form(question: Question | None = None) -> dict:
    if question is None:
        rows = [{"id": "", "text": "", "correct": False} for _ in range(4)]
        return {"text": "", "answers": rows}
    rows = [{"id": a.id or "", "text": a.text, "correct": a.is_correct} for a in question.answers]
    return {"text": question.text, "answers": rows}


def _posted_form(answers: list[Answer]) -> dict:
    rows = [{"id": a.id or "", "text": a.text, "correct": a.is_correct} for a in answers]
    return {"text": request.form.get("text") or "", "answers": rows}


def _drafts_for(quiz_id: int) -> list[dict]:
    drafts = session.get(DRAFTS_KEY) or {}
    if drafts.get("quiz_id") != quiz_id:
        return []
    return drafts.get("questions") or []


def _load_quiz(quiz_id: int) -> Quiz | None:
    try:
        return quiz_service().get_quiz(quiz_id)
    except APIError as exc:
        log.warning("could not load quiz %s: %s", quiz_id, exc)
        flash(error_message(exc, default="Error while loading the quiz"), "error")
        return None


def _manage_page(quiz: Quiz, *, add_form=None, add_errors=None, editing=None, edit_form=None, edit_errors=None):
    return render_template(
        "admin/manage_questions.html",
        quiz=quiz,
        add_form=add_form or _question_form(),
        add_errors=add_errors or {},
        editing=editing,
        edit_form=edit_form or (_question_form(editing) if editing else None),
        edit_errors=edit_errors or {},
        drafts=_drafts_for(quiz.id),
        max_answers=MAX_ANSWERS,
        ai_max=AI_MAX_QUESTIONS,
    )


@admin_bp.get("/manage-questions/<int:quiz_id>")
@protected(required_role=Role.ADMIN)
def manage_questions(quiz_id: int):
    quiz = _load_quiz(quiz_id)
    if quiz is None:
        return redirect(ADMIN_HOME)

    editing = None
    edit_id = request.args.get("edit", type=int)
    if edit_id is not None:
        editing = next((q for q in quiz.questions if q.id == edit_id), None)
    return _manage_page(quiz, editing=editing)


@admin_bp.post("/manage-questions/<int:quiz_id>/questions")
@protected(required_role=Role.ADMIN)
def add_question(quiz_id: int):
    quiz = _load_quiz(quiz_id)
    if quiz is None:
        return redirect(ADMIN_HOME)

    answers = _answers_from_form()
    text = normalize_question_text(request.form.get("text") or "")
    errors = validate_question(text, [(a.text, a.is_correct) for a in answers])
    if errors:
        return _manage_page(quiz, add_form=_posted_form(answers), add_errors=errors)

    question = Question(
        id=None,
        text=text,
        order=len(quiz.questions) + 1,
        answers=answers,
        is_multiple_choice=sum(1 for a in answers if a.is_correct) > 1,
    )
    try:
        quiz_service().add_question(quiz_id, question)
    except APIError as exc:
        log.warning("adding a question to quiz %s failed: %s", quiz_id, exc)
        errors["form"] = error_message(exc, default="Error while adding the question")
        return _manage_page(quiz, add_form=_posted_form(answers), add_errors=errors)

    flash("Question added", "success")
    return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))


@admin_bp.post("/manage-questions/<int:quiz_id>/questions/<int:question_id>")
@protected(required_role=Role.ADMIN)
def edit_question(quiz_id: int, question_id: int):
    quiz = _load_quiz(quiz_id)
    if quiz is None:
        return redirect(ADMIN_HOME)

    existing = next((q for q in quiz.questions if q.id == question_id), None)
    if existing is None:
        flash("Question not found", "error")
        return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))

    answers = _answers_from_form()
    text = (request.form.get("text") or "").strip()
    errors = validate_question(text, [(a.text, a.is_correct) for a in answers])
    if errors:
        return _manage_page(quiz, editing=existing, edit_form=_posted_form(answers), edit_errors=errors)

    question = Question(
        id=question_id,
        text=text,
        order=existing.order,
        answers=answers,
        is_multiple_choice=sum(1 for a in answers if a.is_correct) > 1,
    )
    try:
        quiz_service().update_question(quiz_id, question)
    except APIError as exc:
        log.warning("updating question %s failed: %s", question_id, exc)
        errors["form"] = error_message(exc, default="Error while updating the question")
        return _manage_page(quiz, editing=existing, edit_form=_posted_form(answers), edit_errors=errors)

    flash("Question updated", "success")
    return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))


# ── AI drafts ─────────────────────────────────────────────────────────────────

@admin_bp.post("/manage-questions/<int:quiz_id>/generate")
@protected(required_role=Role.ADMIN)
def generate_questions(quiz_id: int):
    text = (request.form.get("source_text") or "").strip()
    count = request.form.get("count", type=int) or 3
    count = min(max(count, 1), AI_MAX_QUESTIONS)
    if not text:
        flash("Paste a text to generate questions from", "error")
        return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))

    result = ai_service().generate(text, count)
    if result.error:
        flash(result.error, "error")
    else:
        session[DRAFTS_KEY] = {"quiz_id": quiz_id, "questions": result.questions}
        flash(result.message, "success")
    return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))


@admin_bp.post("/manage-questions/<int:quiz_id>/generate/add")
@protected(required_role=Role.ADMIN)
def add_generated(quiz_id: int):
    drafts = _drafts_for(quiz_id)
    picked = sorted({int(i) for i in request.form.getlist("selected") if i.isdigit() and int(i) < len(drafts)})
    chosen = [drafts[i] for i in picked]
    if not chosen:
        flash("Select at least one generated question", "error")
        return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))

    quiz = _load_quiz(quiz_id)
    if quiz is None:
        return redirect(ADMIN_HOME)

    valid, rejected = _checked_drafts(to_questions(chosen, start_order=1), picked)
    for number, text, errors in rejected:
        flash(f"Generated question {number} ({text or 'no text'}) was not added: {_first_error(errors)}", "error")
    if not valid:
        return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))

    for offset, question in enumerate(valid):
        question.order = len(quiz.questions) + 1 + offset
    created, error = quiz_service().add_questions(quiz_id, valid)
    if error is not None:
        flash(
            f"{created} of {len(valid)} question(s) added, then: "
            + error_message(error, default="Error while adding the questions"),
            "error",
        )
    else:
        if not rejected:
            session.pop(DRAFTS_KEY, None)
        flash(f"{created} question(s) added", "success")
    return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))


def _checked_drafts(questions: list[Question], picked: list[int]):
    """
    Split drafts into those passing the question rules and
    ``(number, text, errors)`` for the rest, numbered as shown on the page.
    """
    valid, rejected = [], []
    for index, question in zip(picked, questions):
        question.text = normalize_question_text(question.text)
        errors = validate_question(question.text, [(a.text, a.is_correct) for a in question.answers])
        if errors:
            rejected.append((index + 1, question.text, errors))
        else:
            valid.append(question)
    return valid, rejected


def _first_error(errors: dict) -> str:
    return next(iter(errors.values()))


@admin_bp.post("/manage-questions/<int:quiz_id>/generate/discard")
@protected(required_role=Role.ADMIN)
def discard_generated(quiz_id: int):
    session.pop(DRAFTS_KEY, None)
    return redirect(url_for("admin.manage_questions", quiz_id=quiz_id))


# ── Results ───────────────────────────────────────────────────────────────────

@admin_bp.get(RESULTS_DETAIL_PATH)
@protected(required_role=Role.ADMIN)
def results_detail():
    state = peek_state(RESULTS_DETAIL_PATH)
    if not state or not state.get("quiz_id"):
        flash("Missing quiz data", "error")
        return redirect(ADMIN_HOME)

    quiz_id = state["quiz_id"]
    service = quiz_service()
    try:
        attempts = service.list_quiz_attempts(quiz_id)
    except APIError as exc:
        log.warning("could not load attempts on quiz %s: %s", quiz_id, exc)
        return render_template(
            "admin/results_detail.html",
            quiz=state,
            error=error_message(exc, default="Error while loading the results"),
            metrics=calculate_metrics([]),
            attempts=[],
            term="",
            selected=None,
            details=[],
            email_of=participant_email,
        )

    term = request.args.get("q", "")
    selected = None
    details: list[AttemptDetail] = []
    selected_id = request.args.get("attempt", type=int)
    if selected_id is not None:
        selected = next((a for a in attempts if a.id == selected_id), None)
        if selected is not None:
            try:
                details = service.get_quiz_attempt_details(quiz_id, selected_id)
            except APIError as exc:
                log.warning("could not load attempt %s: %s", selected_id, exc)
                flash("Error while loading the attempt details", "error")

    return render_template(
        "admin/results_detail.html",
        quiz=state,
        error=None,
        metrics=calculate_metrics(attempts),
        attempts=filter_students(attempts, term),
        term=term,
        selected=selected,
        details=details,
        email_of=participant_email,
    )
