from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def _parse_date(value) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Attempt:
    id: int
    quiz_title: str
    quiz_code: str
    first_name: str
    last_name: str
    started_at: datetime | None
    score: int
    total_questions: int
    percentage: int
    is_passed: bool
    email: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Attempt":
        user = data.get("utilisateur") if isinstance(data.get("utilisateur"), dict) else {}
        return cls(
            id=data.get("id") or 0,
            quiz_title=(
                data.get("questionnaireTitre") or data.get("quizTitle")
                or data.get("titre") or "Untitled quiz"
            ),
            quiz_code=data.get("questionnaireCode") or data.get("quizCode") or data.get("code") or "N/A",
            first_name=data.get("prenomParticipant") or "",
            last_name=data.get("nomParticipant") or "",
            started_at=_parse_date(data.get("date") or data.get("dateDebut")),
            score=data.get("score") or 0,
            total_questions=data.get("nombreTotalQuestions") or data.get("totalQuestions") or 0,
            percentage=data.get("pourcentage") or data.get("percentage") or 0,
            is_passed=bool(data.get("estReussi") or data.get("isPassed")),
            email=user.get("email"),
        )

    @property
    def participant_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class AttemptDetail:
    question_id: int
    question_text: str
    user_answer: str
    correct_answer: str
    is_correct: bool

    @classmethod
    def from_history(cls, data: dict) -> "AttemptDetail":
        """Detail row of GET /api/quizzes/history/<id>."""
        return cls(
            question_id=int(data.get("questionId") or 0),
            question_text=data.get("questionTexte") or "",
            user_answer=data.get("reponseUtilisateurTexte") or "No answer",
            correct_answer=data.get("reponseCorrecteTexte") or "",
            is_correct=bool(data.get("estCorrecte")),
        )

    @classmethod
    def from_admin(cls, data: dict) -> "AttemptDetail":
        """Detail row of GET /api/quizzes/<quiz>/attempts/<id>."""
        user_answer = data.get("reponseUtilisateur") or {}
        correct = data.get("bonnesReponses") or []
        return cls(
            question_id=int(data.get("questionId") or 0),
            question_text=data.get("questionTexte") or "",
            user_answer=user_answer.get("texte") or "No answer",
            correct_answer=(correct[0].get("texte") if correct else None) or "Correct answer not found",
            is_correct=bool(data.get("estCorrecte")),
        )

    @classmethod
    def from_result(cls, data: dict) -> "AttemptDetail":
        """Row of GET /api/public/questionnaires/tentative/<id>."""
        selected = data.get("reponseSelectionnee") or {}
        correct = data.get("bonneReponse") or {}
        return cls(
            question_id=int(data.get("questionId") or 0),
            question_text=data.get("questionTexte") or "",
            user_answer=selected.get("texte") or "No answer",
            correct_answer=correct.get("texte") or selected.get("texte") or "",
            is_correct=bool(selected.get("estCorrecte")),
        )
