"""
The quiz-taking state machine.

    LOADING → PRESENTING(i) → SUBMITTING → DONE

A QuizAttempt walks an ordered list of questions and records the student's
selection for each: a single answer id for single-choice questions, a list
of ids for multiple-choice ones. Only the progress (index, selections,
status) is kept between requests; the questions themselves are reloaded by
the page and handed back to ``QuizAttempt.restore``.
"""
from __future__ import annotations

from enum import Enum

from quizweb.models.quiz import Question


class Status(str, Enum):
    LOADING = "loading"
    PRESENTING = "presenting"
    SUBMITTING = "submitting"
    DONE = "done"


class Step(str, Enum):
    ADVANCED = "advanced"
    SUBMIT = "submit"
    BLOCKED = "blocked"


class AttemptError(Exception):
    pass


class QuizAttempt:
    def __init__(
        self,
        quiz: dict,
        participant: dict,
        questions: list[Question],
        index: int = 0,
        answers: dict | None = None,
        status: Status = Status.PRESENTING,
    ):
        if not questions:
            raise AttemptError("This quiz has no questions")
        self.quiz = quiz
        self.participant = participant
        self.questions = sorted(questions, key=lambda q: q.order)
        self.index = min(max(index, 0), len(self.questions) - 1)
        self.answers: dict[int, int | list[int]] = dict(answers or {})
        self.status = Status(status)

    @classmethod
    def start(cls, quiz: dict, participant: dict, questions: list[Question]) -> "QuizAttempt":
        return cls(quiz, participant, questions)

    # ── Read side ────────────────────────────────────────────────────────────

    @property
    def current_question(self) -> Question:
        return self.questions[self.index]

    @property
    def is_last(self) -> bool:
        return self.index == len(self.questions) - 1

    @property
    def progress(self) -> int:
        return round((self.index + 1) / len(self.questions) * 100)

    def selection(self, question: Question) -> list[int]:
        chosen = self.answers.get(question.id)
        if chosen is None:
            return []
        return list(chosen) if isinstance(chosen, list) else [chosen]

    def has_answered(self, question: Question) -> bool:
        return len(self.selection(question)) > 0

    @property
    def can_advance(self) -> bool:
        return self.status == Status.PRESENTING and self.has_answered(self.current_question)

    # ── Transitions ──────────────────────────────────────────────────────────

    def select(self, answer_id: int) -> None:
        if self.status != Status.PRESENTING:
            raise AttemptError(f"cannot select an answer while {self.status.value}")
        question = self.current_question
        if answer_id not in {a.id for a in question.answers}:
            raise AttemptError(f"answer {answer_id} does not belong to question {question.id}")

        if question.is_multiple_choice:
            chosen = self.selection(question)
            if answer_id in chosen:
                chosen.remove(answer_id)
            else:
                chosen.append(answer_id)
            self.answers[question.id] = chosen
        else:
            self.answers[question.id] = answer_id

    def next(self) -> Step:
        if not self.can_advance:
            return Step.BLOCKED
        if self.is_last:
            return Step.SUBMIT
        self.index += 1
        return Step.ADVANCED

    def previous(self) -> None:
        if self.status == Status.PRESENTING:
            self.index = max(0, self.index - 1)

    def begin_submission(self) -> list[dict]:
        if self.status == Status.SUBMITTING:
            raise AttemptError("submission already in progress")
        if self.status != Status.PRESENTING or not self.is_last or not self.can_advance:
            raise AttemptError("the attempt is not ready to be submitted")
        self.status = Status.SUBMITTING
        return self.build_submission()

    def fail_submission(self) -> None:
        self.status = Status.PRESENTING

    def complete(self) -> None:
        self.status = Status.DONE

    def build_submission(self) -> list[dict]:
        """One ``{questionId, reponseId}`` pair per selected answer, in question order."""
        pairs = []
        for question in self.questions:
            pairs.extend(
                {"questionId": question.id, "reponseId": answer_id}
                for answer_id in self.selection(question)
            )
        return pairs

    # ── Persistence between requests ─────────────────────────────────────────

    def to_progress(self) -> dict:
        return {
            "quiz": self.quiz,
            "participant": self.participant,
            "index": self.index,
            "answers": {str(k): v for k, v in self.answers.items()},
            "status": self.status.value,
        }

    @classmethod
    def restore(cls, progress: dict, questions: list[Question]) -> "QuizAttempt":
        known = {q.id for q in questions}
        answers = {
            int(k): v for k, v in (progress.get("answers") or {}).items()
            if int(k) in known
        }
        return cls(
            progress["quiz"],
            progress["participant"],
            questions,
            index=progress.get("index", 0),
            answers=answers,
            status=Status(progress.get("status", Status.PRESENTING.value)),
        )
