import pytest

from quizweb.models.quiz import Answer, Question
from quizweb.quiz.attempt import AttemptError, QuizAttempt, Status, Step

QUIZ = {"id": 5, "title": "Python", "access_code": "PY5", "passing_score": 50}
PARTICIPANT = {"first_name": "Sam", "last_name": "Student", "quiz_code": "PY5"}


def _question(qid, order, answer_ids, multiple=False):
    answers = [Answer(id=a, text=f"answer {a}", order=i + 1) for i, a in enumerate(answer_ids)]
    return Question(id=qid, text=f"question {qid}?", order=order, answers=answers, is_multiple_choice=multiple)


def _attempt(*questions):
    return QuizAttempt.start(QUIZ, PARTICIPANT, list(questions))


def test_questions_are_presented_in_order():
    attempt = _attempt(_question(2, 2, [21, 22]), _question(1, 1, [11, 12]))
    assert attempt.current_question.id == 1
    assert attempt.status == Status.PRESENTING


def test_quiz_without_questions_cannot_start():
    with pytest.raises(AttemptError):
        _attempt()


def test_next_is_blocked_until_answered():
    attempt = _attempt(_question(1, 1, [11, 12]), _question(2, 2, [21, 22]))
    assert attempt.next() is Step.BLOCKED
    attempt.select(11)
    assert attempt.next() is Step.ADVANCED
    assert attempt.index == 1


def test_single_choice_replaces_selection():
    attempt = _attempt(_question(1, 1, [11, 12]))
    attempt.select(11)
    attempt.select(12)
    assert attempt.answers == {1: 12}


def test_multiple_choice_toggles_membership():
    attempt = _attempt(_question(1, 1, [11, 12, 13], multiple=True))
    attempt.select(11)
    attempt.select(13)
    attempt.select(11)
    assert attempt.selection(attempt.current_question) == [13]


def test_foreign_answer_is_rejected():
    attempt = _attempt(_question(1, 1, [11, 12]))
    with pytest.raises(AttemptError):
        attempt.select(99)


def test_previous_keeps_answers():
    attempt = _attempt(_question(1, 1, [11, 12]), _question(2, 2, [21, 22]))
    attempt.select(12)
    attempt.next()
    attempt.previous()
    assert attempt.index == 0
    assert attempt.selection(attempt.current_question) == [12]
    attempt.previous()
    assert attempt.index == 0


def test_two_question_single_choice_submission():
    attempt = _attempt(_question(1, 1, [11, 12]), _question(2, 2, [21, 22]))
    attempt.select(11)
    attempt.next()
    attempt.select(22)
    assert attempt.next() is Step.SUBMIT

    pairs = attempt.begin_submission()

    assert pairs == [
        {"questionId": 1, "reponseId": 11},
        {"questionId": 2, "reponseId": 22},
    ]
    assert attempt.status == Status.SUBMITTING


def test_submission_length_counts_each_multiple_choice_selection():
    attempt = _attempt(
        _question(1, 1, [11, 12]),
        _question(2, 2, [21, 22, 23, 24], multiple=True),
        _question(3, 3, [31, 32, 33], multiple=True),
    )
    attempt.select(11)
    attempt.next()
    for answer_id in (21, 23, 24):
        attempt.select(answer_id)
    attempt.next()
    attempt.select(32)

    pairs = attempt.begin_submission()

    assert len(pairs) == 1 + 3 + 1


def test_second_submission_is_refused_while_one_is_running():
    attempt = _attempt(_question(1, 1, [11, 12]))
    attempt.select(11)
    attempt.begin_submission()
    with pytest.raises(AttemptError):
        attempt.begin_submission()
    with pytest.raises(AttemptError):
        attempt.select(12)


def test_failed_submission_can_be_retried():
    attempt = _attempt(_question(1, 1, [11, 12]))
    attempt.select(11)
    attempt.begin_submission()
    attempt.fail_submission()
    assert attempt.status == Status.PRESENTING
    assert attempt.begin_submission() == [{"questionId": 1, "reponseId": 11}]


def test_submission_before_last_question_is_refused():
    attempt = _attempt(_question(1, 1, [11, 12]), _question(2, 2, [21, 22]))
    attempt.select(11)
    with pytest.raises(AttemptError):
        attempt.begin_submission()


def test_progress_survives_a_round_trip():
    q1, q2 = _question(1, 1, [11, 12]), _question(2, 2, [21, 22, 23], multiple=True)
    attempt = _attempt(q1, q2)
    attempt.select(12)
    attempt.next()
    attempt.select(21)
    attempt.select(23)

    restored = QuizAttempt.restore(attempt.to_progress(), [q2, q1])

    assert restored.index == 1
    assert restored.answers == {1: 12, 2: [21, 23]}
    assert restored.quiz == QUIZ
    assert restored.participant == PARTICIPANT


def test_progress_for_removed_questions_is_dropped():
    q1, q2 = _question(1, 1, [11, 12]), _question(2, 2, [21, 22])
    attempt = _attempt(q1, q2)
    attempt.select(11)
    progress = attempt.to_progress()

    restored = QuizAttempt.restore(progress, [q2])

    assert restored.answers == {}
    assert restored.index == 0
