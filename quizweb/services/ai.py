"""
AI-assisted question generation.

Endpoints
---------
GET   /api/ai/check-availability   – {isAvailable, message}
POST  /api/ai/generate-questions   – {text, numberOfQuestions} → {questions: [...]}

Generated questions come back as ``{question, answers: [{text, correct}]}``
and are converted to ``Question`` objects numbered after the quiz's current
questions. Failures are reported in the result, never raised, except for a
401 which tears the session down like everywhere else.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from quizweb.models.quiz import Answer, Question
from quizweb.services.api_client import APIError, error_message

log = logging.getLogger(__name__)

_AI_MESSAGES = {
    500: "AI server error. Check the AI provider configuration.",
}


@dataclass
class GenerationResult:
    questions: list[dict] = field(default_factory=list)
    message: str | None = None
    error: str | None = None


class AIService:
    def __init__(self, api):
        self.api = api

    def check_availability(self) -> tuple[bool, str | None]:
        try:
            data = self.api.get("/api/ai/check-availability") or {}
        except APIError as exc:
            log.warning("AI availability check failed: %s", exc)
            return False, error_message(exc, _AI_MESSAGES, default="AI availability check failed")
        if not data.get("isAvailable"):
            return False, data.get("message") or "The AI service is not available"
        return True, data.get("message")

    def generate(self, text: str, count: int = 3) -> GenerationResult:
        available, reason = self.check_availability()
        if not available:
            return GenerationResult(error=reason)
        try:
            data = self.api.post(
                "/api/ai/generate-questions",
                {"text": text, "numberOfQuestions": count},
            ) or {}
        except APIError as exc:
            log.warning("AI generation failed: %s", exc)
            return GenerationResult(error=error_message(exc, _AI_MESSAGES, default="Question generation failed"))
        if data.get("error"):
            return GenerationResult(error=str(data["error"]))
        questions = [q for q in data.get("questions") or [] if isinstance(q, dict)]
        return GenerationResult(
            questions=questions,
            message=data.get("message") or f"Generated {len(questions)} question(s)",
        )


def to_questions(generated: list[dict], start_order: int) -> list[Question]:
    """Convert generated questions into drafts numbered from *start_order*."""
    questions = []
    for offset, item in enumerate(generated):
        answers = [
            Answer(id=None, text=a.get("text", ""), order=i + 1, is_correct=bool(a.get("correct")))
            for i, a in enumerate(item.get("answers") or [])
        ]
        questions.append(
            Question(
                id=None,
                text=item.get("question", ""),
                order=start_order + offset,
                answers=answers,
                is_multiple_choice=sum(1 for a in answers if a.is_correct) > 1,
            )
        )
    return questions
