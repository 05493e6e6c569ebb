from __future__ import annotations

from dataclasses import dataclass, field


def _first(data: dict, *keys, default=None):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass
class Answer:
    id: int | None
    text: str
    order: int
    is_correct: bool = False

    @classmethod
    def from_api(cls, data: dict, position: int = 0) -> "Answer":
        return cls(
            id=data.get("id"),
            text=_first(data, "texte", "text", default=""),
            order=_first(data, "numeroOrdre", "orderNumber", default=position + 1),
            is_correct=bool(_first(data, "estCorrecte", "isCorrect", default=False)),
        )

    def to_api(self, order: int | None = None) -> dict:
        return {
            "texte": self.text,
            "estCorrecte": self.is_correct,
            "numeroOrdre": order if order is not None else self.order,
        }


@dataclass
class Question:
    id: int | None
    text: str
    order: int
    answers: list[Answer] = field(default_factory=list)
    is_multiple_choice: bool = False

    @classmethod
    def from_api(cls, data: dict, position: int = 0) -> "Question":
        answers = [
            Answer.from_api(a, i)
            for i, a in enumerate(_first(data, "reponses", "answers", default=[]))
        ]
        answers.sort(key=lambda a: a.order)
        multiple = data.get("isMultipleChoice")
        if multiple is None:
            multiple = sum(1 for a in answers if a.is_correct) > 1
        return cls(
            id=data.get("id"),
            text=_first(data, "texte", "text", default=""),
            order=_first(data, "numeroOrdre", "order", default=position + 1),
            answers=answers,
            is_multiple_choice=bool(multiple),
        )

    def to_api(self, quiz_id: int) -> dict:
        """Payload accepted by POST/PUT /api/questions; answers are renumbered 1..n."""
        return {
            "texte": self.text,
            "numeroOrdre": self.order,
            "questionnaire": quiz_id,
            "reponses": [a.to_api(order=i + 1) for i, a in enumerate(self.answers)],
        }

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)


@dataclass
class Quiz:
    id: int
    title: str
    access_code: str = ""
    is_active: bool = False
    is_started: bool = False
    description: str | None = None
    passing_score: int | None = None
    created_at: str | None = None
    questions: list[Question] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "Quiz":
        questions = [
            Question.from_api(q, i) for i, q in enumerate(data.get("questions") or [])
            if isinstance(q, dict)
        ]
        questions.sort(key=lambda q: q.order)
        return cls(
            id=data["id"],
            title=_first(data, "title", "titre", default=""),
            access_code=_first(data, "accessCode", "uniqueCode", "code", default=""),
            is_active=bool(_first(data, "isActive", "estActif", default=False)),
            is_started=bool(_first(data, "isStarted", "estDemarre", default=False)),
            description=data.get("description"),
            passing_score=data.get("scorePassage"),
            created_at=data.get("createdAt"),
            questions=questions,
        )

    def to_state(self) -> dict:
        """Compact form carried between pages in navigation state."""
        return {
            "id": self.id,
            "title": self.title,
            "access_code": self.access_code,
            "passing_score": self.passing_score,
        }

    def __repr__(self):
        return f"<Quiz id={self.id} code={self.access_code}>"
