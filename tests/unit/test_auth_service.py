"""Unit tests for AuthService.

Tests bcrypt password hashing and JWT access token creation/validation.
"""

import time
from unittest.mock import MagicMock, patch

import bcrypt
import jwt
import pytest

from tickify.errors import ConfigError, EncryptionError, JWTError, WrongPassword
from tickify.models.user import Role
from tickify.services.auth_service import JWT_ALGORITHM, AuthService


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

JWT_SECRET = "test-secret-key-for-jwt-unit-tests"


def _settings(secret=JWT_SECRET, ttl=900):
    return MagicMock(jwt_secret=secret, jwt_expiration_time=ttl)


@pytest.fixture
def auth_service():
    """Create an AuthService with a deterministic JWT secret and TTL."""
    return AuthService(settings=_settings())


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

class TestPasswordHashing:
    """Tests for hash_password and verify_password."""

    def test_hash_is_bcrypt(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")
        assert hashed.startswith("$2")
        assert bcrypt.checkpw(b"correct-horse", hashed.encode("utf-8"))

    def test_hash_uses_fresh_salt(self, auth_service):
        assert auth_service.hash_password("same-password") != auth_service.hash_password("same-password")

    def test_verify_matching_password(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")
        assert auth_service.verify_password("correct-horse", hashed) is True

    def test_verify_wrong_password_raises(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")
        with pytest.raises(WrongPassword):
            auth_service.verify_password("battery-staple", hashed)

    def test_verify_malformed_hash_raises_wrong_password(self, auth_service):
        """A corrupt hash is indistinguishable from a wrong password."""
        with pytest.raises(WrongPassword):
            auth_service.verify_password("correct-horse", "not-a-bcrypt-hash")

    def test_hash_failure_raises_encryption_error(self, auth_service):
        with patch("tickify.services.auth_service.bcrypt.hashpw", side_effect=ValueError("boom")):
            with pytest.raises(EncryptionError):
                auth_service.hash_password("correct-horse")


# ---------------------------------------------------------------------------
# Access tokens
# ---------------------------------------------------------------------------

class TestCreateAccessToken:
    """Tests for create_access_token."""

    def test_claims(self, auth_service):
        token = auth_service.create_access_token("alice", Role.MODERATOR)
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])

        assert payload["sub"] == "alice"
        assert payload["role"] == "moderator"
        assert payload["exp"] - payload["iat"] == 900

    def test_ttl_override(self, auth_service):
        token = auth_service.create_access_token("alice", Role.USER, ttl_seconds=60)
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert payload["exp"] - payload["iat"] == 60

    def test_missing_secret_raises_config_error(self):
        service = AuthService(settings=_settings(secret=""))
        with pytest.raises(ConfigError):
            service.create_access_token("alice", Role.USER)

    def test_missing_ttl_raises_config_error(self):
        service = AuthService(settings=_settings(ttl=None))
        with pytest.raises(ConfigError):
            service.create_access_token("alice", Role.USER)

    def test_non_positive_ttl_raises_config_error(self):
        service = AuthService(settings=_settings(ttl=0))
        with pytest.raises(ConfigError):
            service.create_access_token("alice", Role.USER)


class TestValidateAccessToken:
    """Tests for validate_access_token."""

    def test_round_trip(self, auth_service):
        token = auth_service.create_access_token("alice", Role.ADMIN)
        claims = auth_service.validate_access_token(token)

        assert claims.sub == "alice"
        assert claims.role == Role.ADMIN

    def test_expired_token_rejected(self, auth_service):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "alice", "role": "user", "iat": now - 120, "exp": now - 60},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(JWTError, match="expired"):
            auth_service.validate_access_token(token)

    def test_wrong_secret_rejected(self, auth_service):
        token = AuthService(settings=_settings(secret="other-secret")).create_access_token(
            "alice", Role.USER
        )
        with pytest.raises(JWTError):
            auth_service.validate_access_token(token)

    def test_tampered_token_rejected(self, auth_service):
        token = auth_service.create_access_token("alice", Role.USER)
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(JWTError):
            auth_service.validate_access_token(tampered)

    def test_garbage_rejected(self, auth_service):
        with pytest.raises(JWTError):
            auth_service.validate_access_token("not.a.jwt")

    def test_missing_role_claim_rejected(self, auth_service):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "alice", "iat": now, "exp": now + 60},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(JWTError):
            auth_service.validate_access_token(token)

    def test_unknown_role_rejected(self, auth_service):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "alice", "role": "superuser", "iat": now, "exp": now + 60},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(JWTError):
            auth_service.validate_access_token(token)
