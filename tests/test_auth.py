"""Unit tests for password hashing and bearer tokens."""
import sys
from datetime import timedelta
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import patch
from services.auth import AuthError, create_token, decode_token, hash_password, verify_password
from models.user import User

SECRET = "unit-test-secret-with-at-least-32-bytes!"


@pytest.fixture
def user():
    return User(
        id=42,
        email="ada@example.com",
        name="Ada",
        password_hash="",
        role="user",
        is_approved=True
    )


class TestPasswords:

    def test_hash_and_verify(self):
        password_hash = hash_password("correct horse battery")

        assert password_hash != "correct horse battery"
        assert verify_password("correct horse battery", password_hash)
        assert not verify_password("wrong password", password_hash)

    def test_hashes_are_salted(self):
        assert hash_password("same password") != hash_password("same password")

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_hash_rejects_password_over_72_bytes(self):
        with pytest.raises(ValueError, match="72 bytes"):
            hash_password("\u00e9" * 37)

    def test_over_long_password_never_verifies(self):
        password_hash = hash_password("p" * 50)

        with patch("services.auth.logger") as mock_logger:
            assert not verify_password("p" * 100, password_hash)

        mock_logger.warning.assert_not_called()

    def test_password_at_limit_round_trips(self):
        assert verify_password("p" * 72, hash_password("p" * 72))


class TestTokens:

    def test_round_trip(self, user):
        claims = decode_token(create_token(user, secret=SECRET), secret=SECRET)

        assert claims.user_id == 42
        assert claims.email == "ada@example.com"
        assert claims.role == "user"

    def test_expired_token(self, user):
        token = create_token(user, secret=SECRET, ttl=timedelta(seconds=-10))

        with pytest.raises(AuthError, match="expired"):
            decode_token(token, secret=SECRET)

    def test_wrong_secret(self, user):
        token = create_token(user, secret=SECRET)

        with pytest.raises(AuthError, match="Invalid"):
            decode_token(token, secret="another-secret-that-is-also-long-enough")

    def test_garbage_token(self):
        with pytest.raises(AuthError):
            decode_token("not.a.token", secret=SECRET)

    def test_missing_secret(self, user):
        with patch('services.auth.JWT_SECRET', None):
            with pytest.raises(AuthError, match="JWT_SECRET"):
                create_token(user)

    def test_uses_configured_secret(self, user):
        with patch('services.auth.JWT_SECRET', SECRET):
            assert decode_token(create_token(user)).user_id == 42
