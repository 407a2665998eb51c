"""End-to-end tests of the HTTP routes with FastAPI's TestClient and a temporary SQLite store."""

import tempfile
import unittest
from contextlib import ExitStack
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.exc import OperationalError

from rolegate.core.config import Settings
from rolegate.core.security import unsign_session_id
from rolegate.main import create_app
from rolegate.models import Role, User
from rolegate.services.sessions import SessionStoreError

COOKIE = "rolegate_session"


class RoutesTestCase(unittest.TestCase):
    """Boots a fresh app (schema, roles, default admin) for every test."""

    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.settings = Settings(
            _env_file=None,
            DATABASE_URL=f"sqlite:///{Path(tmpdir.name) / 'test.sqlite'}",
            SESSION_SECRET=SecretStr("test-secret"),
            SESSION_COOKIE_NAME=COOKIE,
        )
        self.app = create_app(self.settings)
        self.context = self.app.state.context
        stack = ExitStack()
        self.addCleanup(stack.close)
        self.client = stack.enter_context(TestClient(self.app, follow_redirects=False))

    def register(self, login: str, password: str):
        return self.client.post("/register", data={"login": login, "password": password})

    def login(self, login: str, password: str):
        return self.client.post("/login", data={"login": login, "password": password})

    def current_identity(self):
        cookie = self.client.cookies.get(COOKIE)
        if cookie is None:
            return None
        session_id = unsign_session_id(cookie, self.settings)
        return self.context.sessions.read(session_id) if session_id else None

    def assertRedirects(self, response, location: str) -> None:
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], location)


class TestHome(RoutesTestCase):
    def test_anonymous_goes_to_login(self) -> None:
        self.assertRedirects(self.client.get("/"), "/login")

    def test_logged_in_goes_to_profile(self) -> None:
        self.login("admin", "admin")
        self.assertRedirects(self.client.get("/"), "/profile")


class TestRegistration(RoutesTestCase):
    def test_form_is_rendered(self) -> None:
        response = self.client.get("/register")
        self.assertEqual(response.status_code, 200)
        self.assertIn("text/html", response.headers["content-type"])
        self.assertIn('action="/register"', response.text)

    def test_register_then_login_creates_user_session(self) -> None:
        self.assertRedirects(self.register("alice", "wonderland"), "/login")
        self.assertRedirects(self.login("alice", "wonderland"), "/profile")

        identity = self.current_identity()
        self.assertIsNotNone(identity)
        self.assertEqual(identity.login, "alice")
        self.assertEqual(identity.role, "user")

    def test_password_is_stored_hashed(self) -> None:
        self.register("alice", "wonderland")
        with self.context.session_factory() as db:
            stored = db.query(User).filter(User.login == "alice").one()
        self.assertNotEqual(stored.password, "wonderland")

    def test_duplicate_login_is_rejected(self) -> None:
        self.register("alice", "wonderland")
        response = self.register("alice", "looking-glass")

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.text.startswith("Registration failed:"))
        with self.context.session_factory() as db:
            self.assertEqual(db.query(User).filter(User.login == "alice").count(), 1)

    def test_missing_user_role_is_rejected(self) -> None:
        with self.context.session_factory() as db:
            db.query(Role).filter(Role.name == "user").delete()
            db.commit()

        response = self.register("alice", "wonderland")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.text, "Role not found")

    def test_store_failure_is_server_error(self) -> None:
        error = OperationalError("INSERT", {}, Exception("database is locked"))
        with patch("rolegate.services.auth.create_user", side_effect=error):
            response = self.register("alice", "wonderland")
        self.assertEqual(response.status_code, 500)
        self.assertIn("database is locked", response.text)


class TestLogin(RoutesTestCase):
    def test_form_is_rendered(self) -> None:
        response = self.client.get("/login")
        self.assertEqual(response.status_code, 200)
        self.assertIn('action="/login"', response.text)

    def test_wrong_password_is_unauthorized(self) -> None:
        self.register("alice", "wonderland")
        response = self.login("alice", "wrong")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.text, "Invalid login or password")
        self.assertNotIn(COOKIE, response.cookies)
        self.assertEqual(len(self.context.sessions), 0)

    def test_unknown_login_gets_same_answer(self) -> None:
        response = self.login("nobody", "wonderland")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.text, "Invalid login or password")

    def test_store_failure_is_server_error(self) -> None:
        error = OperationalError("SELECT", {}, Exception("unable to open database file"))
        with patch("rolegate.services.auth.find_user_by_login", side_effect=error):
            response = self.login("admin", "admin")
        self.assertEqual(response.status_code, 500)
        self.assertTrue(response.text.startswith("Server error:"))

    def test_session_store_failure_is_server_error(self) -> None:
        with patch.object(
            self.context.sessions,
            "create",
            side_effect=SessionStoreError("store offline"),
        ):
            response = self.login("admin", "admin")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Server error: store offline")
        self.assertNotIn(COOKIE, response.cookies)


class TestMalformedForms(RoutesTestCase):
    """Incomplete form posts get a plain-text 400, not a JSON body."""

    def test_register_with_empty_login(self) -> None:
        response = self.client.post("/register", data={"login": "", "password": "pw"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("text/plain", response.headers["content-type"])
        self.assertIn("login", response.text)
        with self.context.session_factory() as db:
            self.assertEqual(db.query(User).count(), 1)

    def test_register_without_fields(self) -> None:
        response = self.client.post("/register", data={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.text, "Missing or invalid fields: login, password")

    def test_login_without_password(self) -> None:
        response = self.client.post("/login", data={"login": "admin"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("text/plain", response.headers["content-type"])
        self.assertIn("password", response.text)
        self.assertEqual(len(self.context.sessions), 0)


class TestProfile(RoutesTestCase):
    def test_requires_session(self) -> None:
        response = self.client.get("/profile")
        self.assertRedirects(response, "/login")
        self.assertEqual(response.content, b"")

    def test_greets_login_with_logout_link(self) -> None:
        self.register("alice", "wonderland")
        self.login("alice", "wonderland")
        response = self.client.get("/profile")
        self.assertEqual(response.status_code, 200)
        self.assertIn("alice", response.text)
        self.assertIn('href="/logout"', response.text)

    def test_login_is_html_escaped(self) -> None:
        self.register("<b>eve</b>", "wonderland")
        self.login("<b>eve</b>", "wonderland")
        response = self.client.get("/profile")
        self.assertIn("&lt;b&gt;eve&lt;/b&gt;", response.text)

    def test_forged_cookie_is_ignored(self) -> None:
        self.client.cookies.set(COOKIE, "forged")
        self.assertRedirects(self.client.get("/profile"), "/login")


class TestAdmin(RoutesTestCase):
    def test_requires_session(self) -> None:
        self.assertRedirects(self.client.get("/admin"), "/login")

    def test_user_role_is_forbidden(self) -> None:
        self.register("alice", "wonderland")
        self.login("alice", "wonderland")
        response = self.client.get("/admin")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.text, "Access denied")

    def test_admin_role_is_admitted(self) -> None:
        self.login("admin", "admin")
        response = self.client.get("/admin")
        self.assertEqual(response.status_code, 200)
        self.assertIn("admin panel", response.text)

    def test_role_is_checked_against_the_store(self) -> None:
        self.login("admin", "admin")
        with self.context.session_factory() as db:
            user_role = db.query(Role).filter(Role.name == "user").one()
            admin = db.query(User).filter(User.login == "admin").one()
            admin.role_id = user_role.id
            db.commit()

        self.assertEqual(self.current_identity().role, "admin")
        self.assertEqual(self.client.get("/admin").status_code, 403)

    def test_deleted_account_is_forbidden(self) -> None:
        self.register("alice", "wonderland")
        self.login("alice", "wonderland")
        with self.context.session_factory() as db:
            db.query(User).filter(User.login == "alice").delete()
            db.commit()
        self.assertEqual(self.client.get("/admin").status_code, 403)


class TestLogout(RoutesTestCase):
    def test_logout_ends_session(self) -> None:
        self.login("admin", "admin")
        self.assertEqual(self.client.get("/profile").status_code, 200)

        self.assertRedirects(self.client.get("/logout"), "/")
        self.assertRedirects(self.client.get("/profile"), "/login")

    def test_old_cookie_is_dead_after_logout(self) -> None:
        self.login("admin", "admin")
        old_cookie = self.client.cookies.get(COOKIE)
        self.client.get("/logout")

        self.client.cookies.set(COOKIE, old_cookie)
        self.assertRedirects(self.client.get("/profile"), "/login")

    def test_logout_without_session_still_redirects(self) -> None:
        self.assertRedirects(self.client.get("/logout"), "/")

    def test_store_error_is_logged_and_client_redirected(self) -> None:
        self.login("admin", "admin")
        with (
            patch.object(
                self.context.sessions,
                "delete",
                side_effect=SessionStoreError("store offline"),
            ),
            self.assertLogs("rolegate.services.sessions", level="ERROR"),
        ):
            response = self.client.get("/logout")
        self.assertRedirects(response, "/")


class TestHealth(RoutesTestCase):
    def test_reports_database_connected(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"status": "ok", "environment": "dev", "database": "connected"},
        )


if __name__ == "__main__":
    unittest.main()
