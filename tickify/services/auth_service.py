"""Credential and token service: bcrypt password hashing and JWT access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from pydantic import ValidationError as PydanticValidationError

from tickify.config import Settings, get_settings
from tickify.errors import ConfigError, EncryptionError, JWTError, WrongPassword
from tickify.models.auth import TokenClaims
from tickify.models.user import Role

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"


class AuthService:
    """Service for password hashing and stateless bearer tokens.

    Tokens are signed with the configured secret and are valid until their
    natural expiry; there is no refresh or revocation.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string

        Raises:
            EncryptionError: If hashing fails
        """
        try:
            hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
        except (ValueError, TypeError) as e:
            logger.error("password_hash_failed", error=str(e))
            raise EncryptionError(str(e)) from e
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        A malformed hash and a mismatching password raise the same error so
        callers cannot tell the two apart.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches

        Raises:
            WrongPassword: If the hash is malformed or does not match
        """
        try:
            matches = bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.error("password_hash_malformed", error=str(e))
            raise WrongPassword() from e

        if not matches:
            raise WrongPassword()
        return True

    def _signing_secret(self) -> str:
        if not self.settings.jwt_secret:
            raise ConfigError("JWT_SECRET is not set")
        return self.settings.jwt_secret

    def _ttl_seconds(self, ttl_seconds: Optional[int]) -> int:
        ttl = ttl_seconds if ttl_seconds is not None else self.settings.jwt_expiration_time
        if ttl is None:
            raise ConfigError("JWT_EXPIRATION_TIME is not set")
        if ttl <= 0:
            raise ConfigError("JWT_EXPIRATION_TIME must be a positive number of seconds")
        return ttl

    def create_access_token(
        self, username: str, role: Role, ttl_seconds: Optional[int] = None
    ) -> str:
        """Create a signed JWT access token.

        Args:
            username: Subject placed in the 'sub' claim
            role: Role placed in the 'role' claim
            ttl_seconds: Lifetime override; defaults to the configured TTL

        Returns:
            Encoded JWT string

        Raises:
            ConfigError: If the secret or TTL is unset or malformed
        """
        secret = self._signing_secret()
        ttl = self._ttl_seconds(ttl_seconds)

        now = datetime.now(timezone.utc)
        payload = {
            "sub": username,
            "role": Role(role).value,
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
        }
        token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
        logger.debug("access_token_created", username=username, expires_seconds=ttl)
        return token

    def validate_access_token(self, token: str) -> TokenClaims:
        """Decode and validate a JWT access token.

        Args:
            token: Encoded JWT string

        Returns:
            Validated token claims

        Raises:
            JWTError: If the token is tampered, malformed or expired
        """
        secret = self._signing_secret()

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "role", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise JWTError("Access token has expired") from e
        except jwt.InvalidTokenError as e:
            raise JWTError(f"Invalid access token: {e}") from e

        try:
            return TokenClaims(**payload)
        except PydanticValidationError as e:
            raise JWTError("Invalid access token claims") from e
