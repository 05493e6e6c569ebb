"""
Scoring summaries and result aggregation.

Percentages are rounded half up (12.5 → 13) to match what students see on
the backend-rendered history.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from quizweb.models.attempt import Attempt, AttemptDetail

DEFAULT_PASSING_SCORE = 50
SUCCESS_THRESHOLD = 70


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage_of(correct: int, total: int) -> int:
    return round_half_up(correct / max(total, 1) * 100)


@dataclass
class ResultSummary:
    score: int
    max_score: int
    percentage: int
    passed: bool
    total_questions: int

    @property
    def wrong_answers(self) -> int:
        return max(self.total_questions - self.score, 0)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ResultSummary":
        return cls(**{k: data[k] for k in ("score", "max_score", "percentage", "passed", "total_questions")})


def _passing(passing_score, default: int) -> int:
    return default if passing_score is None else passing_score


def summarize_submission(
    response: dict,
    question_count: int,
    passing_score: int | None = None,
    default_passing: int = DEFAULT_PASSING_SCORE,
) -> ResultSummary:
    """
    Build the summary shown after a submission.

    Optional fields of the backend response are derived when missing: the
    total falls back to the number of questions presented, the correct count
    to the ``resultats`` entries marked correct, and the percentage to
    ``round(correct / total * 100)``.
    """
    response = response or {}
    total = response.get("totalQuestions") or question_count

    correct = response.get("bonnesReponses")
    if correct is None:
        correct = sum(
            1 for r in response.get("resultats") or []
            if (r.get("reponseSelectionnee") or {}).get("estCorrecte") or r.get("estCorrecte")
        )

    score = response.get("score")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        percentage = round_half_up(score)
    else:
        percentage = percentage_of(correct, total)

    return ResultSummary(
        score=correct,
        max_score=total,
        percentage=percentage,
        passed=percentage >= _passing(passing_score, default_passing),
        total_questions=total,
    )


def summarize_details(
    details: list[AttemptDetail],
    score=None,
    passing_score: int | None = None,
    default_passing: int = DEFAULT_PASSING_SCORE,
) -> ResultSummary:
    """Summary rebuilt from a scored attempt's per-question rows."""
    correct = sum(1 for d in details if d.is_correct)
    total = len(details)
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        percentage = round_half_up(score)
    else:
        percentage = percentage_of(correct, total)
    return ResultSummary(
        score=correct,
        max_score=total,
        percentage=percentage,
        passed=percentage >= _passing(passing_score, default_passing),
        total_questions=total,
    )


# ── Admin aggregates ──────────────────────────────────────────────────────────

def calculate_metrics(attempts: list[Attempt]) -> dict:
    if not attempts:
        return {
            "total_students": 0,
            "average_score": 0,
            "attempts": 0,
            "best_score": 0,
            "lowest_score": 0,
            "success_rate": 0,
            "total_questions": 0,
        }
    percentages = [a.percentage or 0 for a in attempts]
    successes = sum(1 for p in percentages if p >= SUCCESS_THRESHOLD)
    return {
        "total_students": len(attempts),
        "average_score": round_half_up(sum(percentages) / len(attempts)),
        "attempts": len(attempts),
        "best_score": max(percentages),
        "lowest_score": min(percentages),
        "success_rate": round_half_up(successes / len(attempts) * 100),
        "total_questions": max(a.total_questions or 0 for a in attempts),
    }


def participant_email(attempt: Attempt) -> str:
    return attempt.email or f"{attempt.first_name}.{attempt.last_name}@email.com"


def filter_students(attempts: list[Attempt], term: str) -> list[Attempt]:
    term = (term or "").strip().lower()
    if not term:
        return list(attempts)
    return [
        a for a in attempts
        if term in a.participant_name.lower() or term in participant_email(a).lower()
    ]


def filter_history(attempts: list[Attempt], term: str) -> list[Attempt]:
    term = (term or "").strip().lower()
    if not term:
        return list(attempts)
    return [
        a for a in attempts
        if term in (a.quiz_title or a.participant_name).lower() or term in (a.quiz_code or "N/A").lower()
    ]
