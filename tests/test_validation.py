from quizweb.quiz.validation import (
    normalize_question_text,
    validate_email,
    validate_login,
    validate_participant,
    validate_password_reset,
    validate_question,
    validate_quiz,
    validate_registration,
)


def test_login():
    assert validate_login("a@b.com", "secret1") == {}
    assert validate_login("", "") == {"email": "Email is required", "password": "Password is required"}
    assert validate_login("not-an-email", "12345") == {
        "email": "Invalid email",
        "password": "Password must be at least 6 characters",
    }


def test_email():
    assert validate_email("a@b.com") == {}
    assert "email" in validate_email("a@b")


def test_registration():
    assert validate_registration("Anne-Marie", "O'Neil", "am@b.com", "secret1") == {}
    errors = validate_registration("A", "L3e", "x" * 180 + "@b.com", "secrets")
    assert errors["first_name"] == "First name must be at least 2 characters"
    assert "letters" in errors["last_name"]
    assert errors["email"] == "Email cannot exceed 180 characters"
    assert errors["password"] == "Password must contain at least one letter and one digit"


def test_password_reset():
    assert validate_password_reset("tok", "secret1", "secret1") == {}
    assert validate_password_reset("tok", "secret1", "secret2") == {"confirm": "Passwords do not match"}
    assert "token" in validate_password_reset("", "secret1", "secret1")


def test_participant():
    assert validate_participant("Sam", "Lee", "PY5") == {}
    errors = validate_participant("S", "", "AB")
    assert set(errors) == {"first_name", "last_name", "quiz_code"}
    assert "quiz_code" in validate_participant("Sam", "Lee", "X" * 21)


def test_quiz():
    assert validate_quiz("Python", "") == {}
    assert validate_quiz("   ", "") == {"title": "Title is required"}
    errors = validate_quiz("T" * 101, "d" * 501)
    assert set(errors) == {"title", "description"}


def test_question_text_gets_a_question_mark():
    assert normalize_question_text("  What is 2+2 ") == "What is 2+2?"
    assert normalize_question_text("Why?") == "Why?"
    assert normalize_question_text("") == ""


def test_valid_question():
    assert validate_question("What is 2+2?", [("4", True), ("5", False)]) == {}


def test_question_must_end_with_question_mark():
    assert validate_question("What is 2+2", [("4", True), ("5", False)]) == {
        "text": "A question must end with a question mark"
    }


def test_question_text_length():
    assert "text" in validate_question("Why?", [("4", True), ("5", False)])
    assert "text" in validate_question("W" * 2000 + "?", [("4", True), ("5", False)])


def test_answer_count():
    assert validate_question("What is 2+2?", [("4", True)])["answers"] == "A question needs at least 2 answers"
    seven = [(str(i), i == 0) for i in range(7)]
    assert validate_question("What is 2+2?", seven)["answers"] == "A question cannot have more than 6 answers"


def test_answers_must_be_filled_and_one_correct():
    assert validate_question("What is 2+2?", [("4", True), (" ", False)])["answers"] == "Answer 2 cannot be empty"
    assert validate_question("What is 2+2?", [("4", False), ("5", False)])["answers"] == (
        "At least one answer must be marked correct"
    )
    assert "answers" in validate_question("What is 2+2?", [("4", True), ("x" * 1001, False)])
