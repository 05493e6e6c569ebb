"""
Quiz service

Endpoints
---------
GET     /api/questionnaires                          – admin's quizzes
POST    /api/questionnaires                          – create a quiz
PUT     /api/questionnaires/<id>                     – update (active flag)
DELETE  /api/questionnaires/<id>                     – delete a quiz
GET     /api/quizzes/<id>                            – quiz with its questions
POST    /api/questions                               – create a question
PUT     /api/questions/<id>                          – replace a question
GET     /api/quizzes/play/code/<CODE>                – find a quiz by access code
GET     /api/public/questionnaires/<id>              – quiz for taking (no correctness)
POST    /api/public/questionnaires/<id>/submit       – submit an attempt
GET     /api/public/questionnaires/tentative/<id>    – scored attempt
GET     /api/quizzes/<id>/attempts                   – all attempts on a quiz
GET     /api/quizzes/<id>/attempts/<attempt_id>      – one attempt, per question
GET     /api/quizzes/history                         – current student's attempts
GET     /api/quizzes/history/<attempt_id>            – one of them, per question

Collections are plain JSON arrays.
"""
from __future__ import annotations

import logging

from quizweb.models.attempt import Attempt, AttemptDetail
from quizweb.models.quiz import Question, Quiz
from quizweb.services.api_client import APIError

log = logging.getLogger(__name__)


def _as_list(data) -> list:
    return data if isinstance(data, list) else []


class QuizService:
    def __init__(self, api):
        self.api = api

    # ── Admin: quizzes ───────────────────────────────────────────────────────

    def list_quizzes(self) -> list[Quiz]:
        return [Quiz.from_api(q) for q in _as_list(self.api.get("/api/questionnaires"))]

    def create_quiz(self, title: str, description: str, passing_score: int) -> Quiz:
        data = self.api.post(
            "/api/questionnaires",
            {
                "title": title,
                "description": description,
                "estActif": True,
                "estDemarre": False,
                "scorePassage": passing_score,
            },
        )
        return Quiz.from_api(data)

    def set_active(self, quiz_id: int, active: bool) -> None:
        self.api.put(f"/api/questionnaires/{quiz_id}", {"estActif": active})

    def delete_quiz(self, quiz_id: int) -> None:
        self.api.delete(f"/api/questionnaires/{quiz_id}")

    def get_quiz(self, quiz_id: int) -> Quiz:
        return Quiz.from_api(self.api.get(f"/api/quizzes/{quiz_id}"))

    # ── Admin: questions ─────────────────────────────────────────────────────

    def add_question(self, quiz_id: int, question: Question) -> None:
        self.api.post("/api/questions", question.to_api(quiz_id))

    def add_questions(self, quiz_id: int, questions: list[Question]) -> tuple[int, APIError | None]:
        """
        Create questions one by one. The first error stops the loop and is
        returned with the number created before it; those stay created.
        """
        created = 0
        for question in questions:
            try:
                self.add_question(quiz_id, question)
            except APIError as exc:
                log.warning("bulk add to quiz %s stopped after %d: %s", quiz_id, created, exc)
                return created, exc
            created += 1
        return created, None

    def update_question(self, quiz_id: int, question: Question) -> None:
        self.api.put(f"/api/questions/{question.id}", question.to_api(quiz_id))

    # ── Students: taking a quiz ──────────────────────────────────────────────

    def find_by_access_code(self, code: str) -> Quiz:
        return Quiz.from_api(self.api.get(f"/api/quizzes/play/code/{code.strip().upper()}"))

    def get_public_quiz(self, quiz_id: int) -> Quiz:
        return Quiz.from_api(self.api.get(f"/api/public/questionnaires/{quiz_id}"))

    def submit_attempt(self, quiz_id: int, first_name: str, last_name: str, answers: list[dict]) -> dict:
        return self.api.post(
            f"/api/public/questionnaires/{quiz_id}/submit",
            {
                "prenomParticipant": first_name,
                "nomParticipant": last_name,
                "reponses": answers,
            },
        ) or {}

    def get_attempt_result(self, attempt_id: int) -> dict:
        return self.api.get(f"/api/public/questionnaires/tentative/{attempt_id}") or {}

    # ── Results ──────────────────────────────────────────────────────────────

    def list_quiz_attempts(self, quiz_id: int) -> list[Attempt]:
        return [Attempt.from_api(a) for a in _as_list(self.api.get(f"/api/quizzes/{quiz_id}/attempts"))]

    def get_quiz_attempt_details(self, quiz_id: int, attempt_id: int) -> list[AttemptDetail]:
        data = self.api.get(f"/api/quizzes/{quiz_id}/attempts/{attempt_id}") or {}
        return [AttemptDetail.from_admin(d) for d in data.get("reponsesDetails") or []]

    def list_history(self) -> list[Attempt]:
        return [Attempt.from_api(a) for a in _as_list(self.api.get("/api/quizzes/history"))]

    def get_history_details(self, attempt_id: int) -> list[AttemptDetail]:
        data = self.api.get(f"/api/quizzes/history/{attempt_id}") or {}
        return [AttemptDetail.from_history(d) for d in data.get("reponsesDetails") or []]
