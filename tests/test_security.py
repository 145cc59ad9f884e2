"""Unit tests for app.core.security: bcrypt hashing, JWT round-trip and token extraction."""

import unittest
from datetime import timedelta

import jwt

from app.core.security import (
    create_access_token,
    decode_access_token,
    extract_token,
    hash_password,
    verify_password,
)
from tests.support import make_request as _request


class TestPasswordHashing(unittest.TestCase):
    """hash_password / verify_password."""

    def test_verify_accepts_original_password(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertTrue(verify_password("s3cret-password", hashed))

    def test_verify_rejects_other_password(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertFalse(verify_password("other-password", hashed))

    def test_same_password_hashes_differently(self) -> None:
        first = hash_password("repeat-me-please")
        second = hash_password("repeat-me-please")
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("repeat-me-please", first))
        self.assertTrue(verify_password("repeat-me-please", second))

    def test_hash_uses_cost_factor_12(self) -> None:
        hashed = hash_password("whatever-password")
        self.assertTrue(hashed.startswith("$2b$12$"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("password123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("password123", ""))

    def test_empty_password_returns_false(self) -> None:
        hashed = hash_password("password123")
        self.assertFalse(verify_password("", hashed))


class TestAccessTokens(unittest.TestCase):
    """create_access_token / decode_access_token."""

    def test_round_trip_claims(self) -> None:
        token, expires_at = create_access_token(
            sub=7, role="admin", expires_delta=timedelta(minutes=5), name="Ada", email="ada@example.com"
        )
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(payload["email"], "ada@example.com")
        self.assertEqual(payload["exp"], int(expires_at.timestamp()))

    def test_tokens_are_unique(self) -> None:
        first, _ = create_access_token(sub=1, role="user", expires_delta=timedelta(minutes=5))
        second, _ = create_access_token(sub=1, role="user", expires_delta=timedelta(minutes=5))
        self.assertNotEqual(first, second)

    def test_expired_token_raises(self) -> None:
        token, _ = create_access_token(sub=1, role="user", expires_delta=timedelta(seconds=-30))
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_foreign_signature_raises(self) -> None:
        token = jwt.encode({"sub": "1", "role": "admin"}, "some-other-secret", algorithm="HS256")
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token)


class TestExtractToken(unittest.TestCase):
    """extract_token reads the Authorization header first, then the session cookie."""

    def test_no_credential_returns_none(self) -> None:
        self.assertIsNone(extract_token(_request()))

    def test_bearer_header(self) -> None:
        self.assertEqual(extract_token(_request(headers={"Authorization": "Bearer abc.def.ghi"})), "abc.def.ghi")

    def test_cookie(self) -> None:
        self.assertEqual(extract_token(_request(cookies={"token": "cookie.tok.en"})), "cookie.tok.en")

    def test_header_wins_over_cookie(self) -> None:
        request = _request(headers={"Authorization": "Bearer from.header.x"}, cookies={"token": "from.cookie.x"})
        self.assertEqual(extract_token(request), "from.header.x")

    def test_non_bearer_header_falls_back_to_cookie(self) -> None:
        request = _request(headers={"Authorization": "Basic dXNlcjpwYXNz"}, cookies={"token": "cookie.tok.en"})
        self.assertEqual(extract_token(request), "cookie.tok.en")

    def test_non_bearer_header_without_cookie_returns_none(self) -> None:
        self.assertIsNone(extract_token(_request(headers={"Authorization": "Basic dXNlcjpwYXNz"})))

    def test_empty_bearer_returns_none(self) -> None:
        self.assertIsNone(extract_token(_request(headers={"Authorization": "Bearer "})))

    def test_scheme_is_case_insensitive(self) -> None:
        for scheme in ("bearer", "BEARER", "bEaReR"):
            with self.subTest(scheme=scheme):
                request = _request(headers={"Authorization": f"{scheme} abc.def.ghi"})
                self.assertEqual(extract_token(request), "abc.def.ghi")

    def test_bearer_prefix_in_cookie_is_stripped(self) -> None:
        self.assertEqual(extract_token(_request(cookies={"token": "Bearer cookie.tok.en"})), "cookie.tok.en")


if __name__ == "__main__":
    unittest.main()
