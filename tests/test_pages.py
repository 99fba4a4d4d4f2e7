# =============================================================================
# tests/test_pages.py - Account Page Flow Tests
# =============================================================================
# Login -> home redirect, failed login -> back to /login/, logout,
# registration, CSRF enforcement.
# =============================================================================

from core.services.user_service import UserService
from lib.db_models import User
from tests.conftest import PASSWORD, extract_csrf, login_via_form


class TestHomePage:
    """GET / requires a logged-in user."""

    def test_anonymous_redirected_to_login(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login/?next=%2F"

    def test_logged_in_sees_profile(self, logged_in_client):
        response = logged_in_client.get("/")

        assert response.status_code == 200
        assert "Welcome, Alice" in response.text
        assert "Finance" in response.text
        assert "Analyst" in response.text

    def test_deactivated_user_is_logged_out(self, logged_in_client, db, user):
        UserService.deactivate_user(db, user.id)

        response = logged_in_client.get("/", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"].startswith("/login/")


class TestLogin:
    """GET/POST /login/."""

    def test_login_page_renders_form(self, client):
        response = client.get("/login/")

        assert response.status_code == 200
        assert 'name="username"' in response.text
        assert 'name="password"' in response.text
        assert extract_csrf(response.text)

    def test_success_redirects_home(self, client, user):
        response = login_via_form(client, "asmith", PASSWORD)

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert client.get("/").status_code == 200

    def test_failure_redirects_back_to_login_without_message(self, client, user):
        response = login_via_form(client, "asmith", "wrong-password")

        assert response.status_code == 303
        assert response.headers["location"] == "/login/"

        page = client.get("/login/")
        assert "invalid" not in page.text.lower()
        assert "incorrect" not in page.text.lower()
        assert client.get("/", follow_redirects=False).status_code == 303

    def test_unknown_user_fails_the_same_way(self, client):
        response = login_via_form(client, "ghost", PASSWORD)
        assert response.headers["location"] == "/login/"

    def test_empty_fields_fail(self, client, user):
        response = login_via_form(client, "", "")
        assert response.headers["location"] == "/login/"

    def test_next_is_honoured(self, client, user):
        response = login_via_form(client, "asmith", PASSWORD, next_url="/register/?x=1")
        assert response.headers["location"] == "/register/?x=1"

    def test_offsite_next_is_ignored(self, client, user):
        response = login_via_form(client, "asmith", PASSWORD, next_url="https://evil.example/")
        assert response.headers["location"] == "/"

    def test_next_carried_into_form(self, client):
        page = client.get("/login/?next=/admin/")
        assert 'name="next" value="/admin/"' in page.text

    def test_logged_in_user_skips_login_page(self, logged_in_client):
        response = logged_in_client.get("/login/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_missing_csrf_token_is_forbidden(self, client, user):
        client.get("/login/")
        response = client.post(
            "/login/",
            data={"username": "asmith", "password": PASSWORD},
            follow_redirects=False,
        )
        assert response.status_code == 403

    def test_wrong_csrf_token_is_forbidden(self, client, user):
        client.get("/login/")
        response = client.post(
            "/login/",
            data={"username": "asmith", "password": PASSWORD, "csrf_token": "forged"},
            follow_redirects=False,
        )
        assert response.status_code == 403

    def test_login_updates_last_login(self, client, db, user):
        login_via_form(client, "asmith", PASSWORD)
        db.expire_all()
        assert db.get(User, user.id).last_login is not None


class TestLogout:
    """POST /logout/."""

    def test_logout_clears_session(self, logged_in_client):
        token = extract_csrf(logged_in_client.get("/").text)

        response = logged_in_client.post(
            "/logout/", data={"csrf_token": token}, follow_redirects=False
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/login/"
        assert logged_in_client.get("/", follow_redirects=False).status_code == 303

    def test_pre_login_token_is_rotated(self, client, user):
        old_token = extract_csrf(client.get("/login/").text)
        login_via_form(client, "asmith", PASSWORD)

        response = client.post("/logout/", data={"csrf_token": old_token}, follow_redirects=False)

        assert response.status_code == 403


class TestRegister:
    """GET/POST /register/."""

    def _post(self, client, data):
        token = extract_csrf(client.get("/register/").text)
        return client.post(
            "/register/", data={**data, "csrf_token": token}, follow_redirects=False
        )

    def test_register_page_renders(self, client):
        response = client.get("/register/")

        assert response.status_code == 200
        for field in ("username", "department", "designation", "password1", "password2"):
            assert f'name="{field}"' in response.text

    def test_successful_registration_logs_in(self, client, db, registration_data):
        response = self._post(client, registration_data)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

        created = UserService.get_by_username(db, "jdoe")
        assert created is not None
        assert created.department == "Engineering"
        assert created.designation == "Developer"
        assert not created.is_staff

        home = client.get("/")
        assert home.status_code == 200
        assert "Welcome, John" in home.text

    def test_invalid_form_rerenders_with_errors(self, client, db, registration_data):
        registration_data["password2"] = "does-Not-Match-1"

        response = self._post(client, registration_data)

        assert response.status_code == 400
        assert "didn&#39;t match" in response.text or "didn't match" in response.text
        # Entered values are kept, passwords are not
        assert 'value="jdoe"' in response.text
        assert "granite-Meadow-19" not in response.text
        assert UserService.get_by_username(db, "jdoe") is None

    def test_malformed_email_rerenders_form(self, client, db, registration_data):
        registration_data["email"] = "john doe@exa mple.com"

        response = self._post(client, registration_data)

        assert response.status_code == 400
        assert "Enter a valid email address." in response.text
        assert UserService.get_by_username(db, "jdoe") is None

    def test_duplicate_username(self, client, user, registration_data):
        registration_data["username"] = "ASMITH"

        response = self._post(client, registration_data)

        assert response.status_code == 400
        assert "already exists" in response.text

    def test_logged_in_user_redirected_from_register(self, logged_in_client):
        response = logged_in_client.get("/register/", follow_redirects=False)
        assert response.status_code == 303
