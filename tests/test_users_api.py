"""
Tests for the /api/v1/users endpoints: signup, login, logout and the
session gate.
"""

from datetime import datetime, timedelta, timezone

from blogpad.models import Session as SessionModel

SIGNUP = "/api/v1/users/signup"
LOGIN = "/api/v1/users/login"
LOGOUT = "/api/v1/users/logout"
ME = "/api/v1/users/me"


def signup(client, username="alice", email="a@x.com", password="secret1"):
    return client.post(
        SIGNUP, json={"username": username, "email": email, "password": password}
    )


class TestSignup:
    def test_creates_user(self, client):
        response = signup(client)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "a@x.com"
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]

    def test_logs_in_implicitly(self, client):
        signup(client)
        assert "session_id" in client.cookies
        response = client.get(ME)
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_session_cookie_flags(self, client):
        response = signup(client)
        cookie = response.headers["set-cookie"].lower()
        assert "httponly" in cookie
        assert "max-age=600" in cookie
        assert "secure" not in cookie

    def test_missing_field_is_400(self, client):
        response = client.post(SIGNUP, json={"email": "a@x.com", "password": "secret1"})
        assert response.status_code == 400
        assert "username" in response.json()["detail"]

    def test_empty_field_is_400(self, client):
        response = signup(client, username="  ")
        assert response.status_code == 400

    def test_duplicate_email_is_409(self, client, other_client):
        signup(client)
        response = signup(other_client, username="alice2", email="A@X.com")
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"


class TestLogin:
    def test_signup_then_login(self, client, other_client):
        signup(client)
        response = other_client.post(LOGIN, json={"email": "a@x.com", "password": "secret1"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["username"] == "alice"
        assert set(body["user"]) == {"id", "username", "email"}
        assert "session_id" in other_client.cookies

    def test_email_is_case_insensitive(self, client, other_client):
        signup(client)
        response = other_client.post(LOGIN, json={"email": "A@X.COM", "password": "secret1"})
        assert response.status_code == 200

    def test_wrong_password_and_unknown_email_look_the_same(self, client, other_client):
        signup(client)
        wrong_password = other_client.post(
            LOGIN, json={"email": "a@x.com", "password": "nope"}
        )
        unknown_email = other_client.post(
            LOGIN, json={"email": "nobody@x.com", "password": "secret1"}
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["detail"] == "Invalid email or password"
        assert "session_id" not in other_client.cookies

    def test_missing_fields_is_400(self, client):
        response = client.post(LOGIN, json={"email": "a@x.com"})
        assert response.status_code == 400

    def test_empty_password_is_400(self, client, caplog):
        signup(client)
        with caplog.at_level("WARNING", logger="blogpad.routers.user_router"):
            response = client.post(LOGIN, json={"email": "a@x.com", "password": ""})
        assert response.status_code == 400
        assert "password" in response.json()["detail"]
        assert "Failed login attempt" not in caplog.text

    def test_failed_login_is_logged(self, client, caplog):
        signup(client)
        with caplog.at_level("WARNING", logger="blogpad.routers.user_router"):
            client.post(LOGIN, json={"email": "a@x.com", "password": "nope"})
        assert "Failed login attempt" in caplog.text


class TestSessionGate:
    def test_me_without_cookie_is_401(self, client):
        response = client.get(ME)
        assert response.status_code == 401

    def test_garbage_cookie_is_401(self, client):
        client.cookies.set("session_id", "not-a-session")
        response = client.get(ME)
        assert response.status_code == 401

    def test_expired_session_is_401(self, signed_in, db):
        db.query(SessionModel).update(
            {SessionModel.expires_at: datetime.now(timezone.utc) - timedelta(seconds=1)}
        )
        db.commit()
        assert signed_in.get(ME).status_code == 401

    def test_logout_destroys_server_session(self, signed_in, other_client):
        token = signed_in.cookies["session_id"]

        response = signed_in.post(LOGOUT)
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
        assert "session_id" not in signed_in.cookies

        # A copy of the old cookie no longer works either
        other_client.cookies.set("session_id", token)
        assert other_client.get(ME).status_code == 401

    def test_logout_without_session_is_ok(self, client):
        assert client.post(LOGOUT).status_code == 200


class TestListUsers:
    def test_lists_public_fields_only(self, client, other_client):
        signup(client)
        signup(other_client, username="bob", email="bob@x.com")

        response = client.get("/api/v1/users")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert [u["username"] for u in body["data"]] == ["alice", "bob"]
        for user in body["data"]:
            assert "password_hash" not in user
