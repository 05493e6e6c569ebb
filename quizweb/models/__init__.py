from quizweb.models.user import Role, User, parse_roles
from quizweb.models.quiz import Answer, Question, Quiz
from quizweb.models.attempt import Attempt, AttemptDetail

__all__ = [
    "Role",
    "User",
    "parse_roles",
    "Answer",
    "Question",
    "Quiz",
    "Attempt",
    "AttemptDetail",
]
