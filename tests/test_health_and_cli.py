"""Health endpoint and the create_user command."""

from unittest.mock import patch

from app.core.security import verify_password
from app.models import Role, User
from app.scripts import create_user
from tests.support import API, ApiTestCase, DatabaseTestCase, TestingSessionLocal


class TestHealth(ApiTestCase):
    def test_reports_connected_database(self) -> None:
        res = self.client.get(f"{API}/health/")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(res.headers["x-content-type-options"], "nosniff")


@patch.object(create_user, "SessionLocal", TestingSessionLocal)
class TestCreateUserCommand(DatabaseTestCase):
    def test_creates_main_admin(self) -> None:
        code = create_user.main(["Root Admin", "Root@Example.com", "a-strong-password", "main_admin"])
        self.assertEqual(code, 0)
        user = self.db.query(User).filter(User.email == "root@example.com").one()
        self.assertEqual(user.role, Role.MAIN_ADMIN)
        self.assertTrue(verify_password("a-strong-password", user.password_hash))

    def test_defaults_to_user_role(self) -> None:
        self.assertEqual(create_user.main(["Plain", "plain@example.com", "a-strong-password"]), 0)
        user = self.db.query(User).filter(User.email == "plain@example.com").one()
        self.assertEqual(user.role, Role.USER)

    def test_only_one_main_admin(self) -> None:
        self.create_user("first@example.com", role=Role.MAIN_ADMIN)
        code = create_user.main(["Second", "second@example.com", "a-strong-password", "main_admin"])
        self.assertEqual(code, 1)

    def test_duplicate_email(self) -> None:
        self.create_user("dupe@example.com")
        self.assertEqual(create_user.main(["Dupe", "dupe@example.com", "a-strong-password"]), 1)

    def test_short_password(self) -> None:
        self.assertEqual(create_user.main(["Shorty", "shorty@example.com", "short"]), 1)

    def test_rejects_emails_signup_would_reject(self) -> None:
        for email in ("no-at-sign.example.com", "@example.com", "ada@", "a@b@example.com"):
            with self.subTest(email=email):
                self.assertEqual(create_user.main(["Ada", email, "a-strong-password"]), 1)
        self.assertEqual(self.db.query(User).count(), 0)
