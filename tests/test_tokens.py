"""Persisted token lifecycle: issue, expiry, invalidation, sessions and refresh rotation."""

import unittest
from datetime import UTC, datetime, timedelta

from app.models import AuthToken, Role, TokenType
from app.services.tokens import (
    TokenError,
    as_utc,
    create_token_pair,
    find_active_token,
    get_user_sessions,
    invalidate_all_user_tokens,
    invalidate_token,
    issue_token,
    rotate_refresh_token,
    token_lifetimes,
)
from tests.support import DatabaseTestCase


class TestTokenLifetimes(DatabaseTestCase):
    def test_admins_and_remembered_logins_live_longer(self) -> None:
        user = self.create_user("user@example.com")
        admin = self.create_user("admin@example.com", role=Role.ADMIN)
        self.assertEqual(token_lifetimes(user), (timedelta(days=1), timedelta(days=7)))
        self.assertEqual(token_lifetimes(user, remember_me=True), (timedelta(days=30), timedelta(days=90)))
        self.assertEqual(token_lifetimes(admin), (timedelta(days=30), timedelta(days=90)))
        self.assertEqual(token_lifetimes(admin, remember_me=True), (timedelta(days=90), timedelta(days=180)))


class TestIssueAndFind(DatabaseTestCase):
    def test_issued_token_is_found(self) -> None:
        user = self.create_user("a@example.com")
        row = issue_token(self.db, user, timedelta(hours=1), user_agent="pytest")
        found = find_active_token(self.db, row.token)
        self.assertIsNotNone(found)
        self.assertEqual(found.user_id, user.id)
        self.assertEqual(found.user_agent, "pytest")

    def test_wrong_type_not_found(self) -> None:
        user = self.create_user("a@example.com")
        row = issue_token(self.db, user, timedelta(hours=1), token_type=TokenType.REFRESH)
        self.assertIsNone(find_active_token(self.db, row.token, TokenType.AUTH))
        self.assertIsNotNone(find_active_token(self.db, row.token, TokenType.REFRESH))

    def test_expired_row_is_marked_invalid(self) -> None:
        user = self.create_user("a@example.com")
        row = issue_token(self.db, user, timedelta(hours=1))
        row.expires_at = datetime.now(UTC) - timedelta(minutes=1)
        self.db.commit()

        self.assertIsNone(find_active_token(self.db, row.token))
        self.db.expire_all()
        self.assertFalse(self.db.get(AuthToken, row.id).is_valid)

    def test_long_user_agent_is_truncated(self) -> None:
        user = self.create_user("a@example.com")
        row = issue_token(self.db, user, timedelta(hours=1), user_agent="x" * 600)
        self.assertEqual(len(row.user_agent), 512)


class TestInvalidation(DatabaseTestCase):
    def test_invalidate_token(self) -> None:
        user = self.create_user("a@example.com")
        token = self.token_for(user)
        self.assertTrue(invalidate_token(self.db, token))
        self.assertIsNone(find_active_token(self.db, token))
        self.assertFalse(invalidate_token(self.db, token))

    def test_invalidate_all_keeps_current(self) -> None:
        user = self.create_user("a@example.com")
        other = self.create_user("b@example.com")
        keep = self.token_for(user)
        drop_one = self.token_for(user)
        drop_two = self.token_for(user)
        untouched = self.token_for(other)

        self.assertEqual(invalidate_all_user_tokens(self.db, user.id, except_token=keep), 2)
        self.assertIsNotNone(find_active_token(self.db, keep))
        self.assertIsNone(find_active_token(self.db, drop_one))
        self.assertIsNone(find_active_token(self.db, drop_two))
        self.assertIsNotNone(find_active_token(self.db, untouched))


class TestSessions(DatabaseTestCase):
    def test_only_active_auth_tokens_are_sessions(self) -> None:
        user = self.create_user("a@example.com")
        live = issue_token(self.db, user, timedelta(hours=1))
        revoked = issue_token(self.db, user, timedelta(hours=1))
        expired = issue_token(self.db, user, timedelta(hours=1))
        issue_token(self.db, user, timedelta(hours=1), token_type=TokenType.REFRESH)
        invalidate_token(self.db, revoked.token)
        expired.expires_at = datetime.now(UTC) - timedelta(seconds=5)
        self.db.commit()

        sessions = get_user_sessions(self.db, user.id)
        self.assertEqual([s.id for s in sessions], [live.id])


class TestRotateRefreshToken(DatabaseTestCase):
    def test_rotation_issues_new_pair_and_retires_old_refresh(self) -> None:
        user = self.create_user("a@example.com")
        pair = create_token_pair(self.db, user, user_agent="pytest")

        rotated_user, new_pair = rotate_refresh_token(self.db, pair.refresh_token)

        self.assertEqual(rotated_user.id, user.id)
        self.assertNotEqual(new_pair.refresh_token, pair.refresh_token)
        self.assertNotEqual(new_pair.access_token, pair.access_token)
        self.assertIsNone(find_active_token(self.db, pair.refresh_token, TokenType.REFRESH))
        self.assertIsNotNone(find_active_token(self.db, new_pair.access_token))
        self.assertEqual(new_pair.access_expires.tzinfo, UTC)

    def test_refresh_token_used_twice_is_rejected(self) -> None:
        user = self.create_user("a@example.com")
        pair = create_token_pair(self.db, user)
        rotate_refresh_token(self.db, pair.refresh_token)
        with self.assertRaises(TokenError) as ctx:
            rotate_refresh_token(self.db, pair.refresh_token)
        self.assertEqual(ctx.exception.message, "Invalid or expired refresh token")

    def test_access_token_is_not_a_refresh_token(self) -> None:
        user = self.create_user("a@example.com")
        pair = create_token_pair(self.db, user)
        with self.assertRaises(TokenError):
            rotate_refresh_token(self.db, pair.access_token)

    def test_garbage_token(self) -> None:
        with self.assertRaises(TokenError) as ctx:
            rotate_refresh_token(self.db, "not-a-jwt")
        self.assertEqual(ctx.exception.message, "Invalid refresh token")


class TestAsUtc(unittest.TestCase):
    def test_naive_is_taken_as_utc(self) -> None:
        value = as_utc(datetime(2026, 1, 1, 12, 0))
        self.assertEqual(value, datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


if __name__ == "__main__":
    unittest.main()
