"""
The admin's quiz list.

Toggling and deleting call the backend first and only touch the local list
when the call succeeded; a failure leaves the list exactly as it was and
returns the message to show.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from quizweb.models.quiz import Quiz
from quizweb.services.api_client import APIError, error_message

log = logging.getLogger(__name__)


class QuizBoard:
    def __init__(self, service, quizzes: list[Quiz] | None = None):
        self.service = service
        self.quizzes: list[Quiz] = list(quizzes or [])

    def load(self) -> str | None:
        try:
            self.quizzes = self.service.list_quizzes()
        except APIError as exc:
            log.warning("could not load quizzes: %s", exc)
            return error_message(exc, default="Could not load quizzes")
        return None

    def find(self, quiz_id: int) -> Quiz | None:
        return next((q for q in self.quizzes if q.id == quiz_id), None)

    @property
    def metrics(self) -> dict:
        return {"quizzes_created": len(self.quizzes)}

    def toggle(self, quiz_id: int) -> tuple[bool, str]:
        quiz = self.find(quiz_id)
        if quiz is None:
            return False, "Quiz not found"
        target = not quiz.is_active
        try:
            self.service.set_active(quiz_id, target)
        except APIError as exc:
            log.warning("toggle quiz %s failed: %s", quiz_id, exc)
            return False, error_message(exc, default="Update failed")
        self.quizzes = [replace(q, is_active=target) if q.id == quiz_id else q for q in self.quizzes]
        return True, "Quiz activated" if target else "Quiz deactivated"

    def delete(self, quiz_id: int) -> tuple[bool, str]:
        if self.find(quiz_id) is None:
            return False, "Quiz not found"
        try:
            self.service.delete_quiz(quiz_id)
        except APIError as exc:
            log.warning("delete quiz %s failed: %s", quiz_id, exc)
            return False, error_message(exc, {500: "Delete failed"}, default="Delete failed")
        self.quizzes = [q for q in self.quizzes if q.id != quiz_id]
        return True, "Quiz deleted"
