from conftest import ADMIN, STUDENT, sign_in


def test_login_scenario(client, backend):
    backend.on("POST", "/api/login_check", 200, {"token": "t1"})
    backend.on("GET", "/api/users/me", 200, STUDENT)

    resp = client.post("/login", data={"email": "a@b.com", "password": "secret1"})

    assert resp.status_code == 302
    assert resp.headers["Location"] == "/student"
    assert client.get_cookie("jwt_token").value == "t1"
    assert backend.calls_to("POST", "/api/login_check")[0].json == {"username": "a@b.com", "password": "secret1"}
    assert backend.calls_to("GET", "/api/users/me")[0].headers["Authorization"] == "Bearer t1"

    assert client.get("/student").status_code == 200


def test_login_form_errors_do_not_reach_backend(client, backend):
    resp = client.post("/login", data={"email": "nope", "password": "123"})
    assert resp.status_code == 200
    assert b"Invalid email" in resp.data
    assert b"Password must be at least 6 characters" in resp.data
    assert backend.calls == []


def test_bad_credentials_are_shown(client, backend):
    backend.on("POST", "/api/login_check", 401, {"code": 401, "message": "Invalid credentials."})
    resp = client.post("/login", data={"email": "a@b.com", "password": "secret1"})
    assert resp.status_code == 200
    assert b"Invalid credentials." in resp.data
    assert client.get_cookie("jwt_token") is None


def test_401_on_current_user_clears_cookie(client, backend):
    client.set_cookie("jwt_token", "stale")
    backend.on("GET", "/api/users/me", 401, {"message": "Expired JWT Token"})

    resp = client.get("/student")

    assert resp.status_code == 302
    assert resp.headers["Location"] == "/login"
    assert client.get_cookie("jwt_token") is None


def test_guard_sends_anonymous_user_to_login_and_back(client, backend):
    resp = client.get("/create-quiz")
    assert resp.headers["Location"] == "/login"

    page = client.get("/login")
    assert b"Please sign in to access this page" in page.data
    assert b'value="/create-quiz"' in page.data

    backend.on("POST", "/api/login_check", 200, {"token": "t1"})
    backend.on("GET", "/api/users/me", 200, ADMIN)
    resp = client.post("/login", data={"email": "a@b.com", "password": "secret1", "next": "/create-quiz"})
    assert resp.headers["Location"] == "/create-quiz"


def test_student_is_kept_out_of_admin_pages(as_student):
    resp = as_student.get("/admin")
    assert resp.headers["Location"] == "/student"

    page = as_student.get("/student")
    assert b"Access denied. Required role: ROLE_ADMIN" in page.data


def test_admin_is_sent_to_dashboard_from_student_pages(as_admin, backend):
    backend.on("GET", "/api/questionnaires", 200, [])
    resp = as_admin.get("/student-history")
    assert resp.headers["Location"] == "/admin"


def test_root_and_unknown_paths(client, backend):
    assert client.get("/").headers["Location"] == "/login"
    assert client.get("/no/such/page").headers["Location"] == "/login"

    sign_in(client, backend, ADMIN)
    assert client.get("/").headers["Location"] == "/admin"


def test_signed_in_user_skips_login_page(as_student):
    assert as_student.get("/login").headers["Location"] == "/student"


def test_session_expiring_mid_page_redirects_to_login(as_admin, backend):
    backend.on("GET", "/api/questionnaires", 401, {"message": "Expired JWT Token"})

    resp = as_admin.get("/admin")

    assert resp.headers["Location"] == "/login"
    assert as_admin.get_cookie("jwt_token") is None
    assert b"Session expired. Please sign in again." in as_admin.get("/login").data


def test_logout(as_student, backend):
    backend.on("POST", "/api/logout", 200, {})

    resp = as_student.post("/logout")

    assert resp.headers["Location"] == "/login"
    assert as_student.get_cookie("jwt_token") is None
    assert len(backend.calls_to("POST", "/api/logout")) == 1


def test_logout_forgets_the_running_attempt(as_student, backend):
    backend.on("POST", "/api/logout", 200, {})
    with as_student.session_transaction() as sess:
        sess["attempt"] = {"quiz": {"id": 5}, "participant": {}, "index": 0, "answers": {"1": 11}}
        sess["ai_drafts"] = {"quiz_id": 12, "questions": []}

    as_student.post("/logout")

    with as_student.session_transaction() as sess:
        assert "attempt" not in sess
        assert "ai_drafts" not in sess


def test_session_expiry_forgets_the_running_attempt(as_admin, backend):
    backend.on("GET", "/api/questionnaires", 401, {"message": "Expired JWT Token"})
    with as_admin.session_transaction() as sess:
        sess["ai_drafts"] = {"quiz_id": 12, "questions": [{"question": "Is it?"}]}

    as_admin.get("/admin")

    with as_admin.session_transaction() as sess:
        assert "ai_drafts" not in sess
        assert sess["nav_state"]["path"] == "/login"


def test_register(client, backend):
    backend.on("POST", "/api/users/register", 201, {"id": 9})

    resp = client.post(
        "/register",
        data={"first_name": "Ana", "last_name": "Lopez", "email": "ana@b.com", "password": "secret1"},
    )

    assert resp.headers["Location"] == "/login"
    assert b"Account created. You can now sign in." in client.get("/login").data


def test_register_duplicate_email(client, backend):
    backend.on("POST", "/api/users/register", 409, {"message": "duplicate"})
    resp = client.post(
        "/register",
        data={"first_name": "Ana", "last_name": "Lopez", "email": "ana@b.com", "password": "secret1"},
    )
    assert resp.status_code == 200
    assert b"This email is already used by another account." in resp.data


def test_forgot_password(client, backend):
    backend.on("POST", "/api/mail/forgot-password", 200, {"message": "Reset email sent"})
    resp = client.post("/forgot-password", data={"email": "ana@b.com"})
    assert b"Reset email sent" in resp.data
    assert backend.calls_to("POST", "/api/mail/forgot-password")[0].json == {"email": "ana@b.com"}


def test_reset_password(client, backend):
    backend.on("POST", "/api/mail/reset-password", 200, {})
    resp = client.post(
        "/reset-password",
        data={"token": "abc", "password": "secret1", "confirm": "secret1"},
    )
    assert resp.headers["Location"] == "/login"
    assert backend.calls_to("POST", "/api/mail/reset-password")[0].json == {"token": "abc", "password": "secret1"}
