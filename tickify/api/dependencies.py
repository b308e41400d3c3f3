"""FastAPI dependencies for authentication and authorization."""

from typing import Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tickify.errors import EmptyHeader, InvalidToken, JWTError, MissingToken, Unauthorized
from tickify.models.user import User
from tickify.services.access_policy import AccessPolicy
from tickify.services.auth_service import AuthService
from tickify.services.user_service import UserService

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Resolve the bearer token in the Authorization header to a user.

    Args:
        request: Incoming request, for the raw header
        credentials: Parsed bearer credentials, None if not a bearer header

    Returns:
        The user named by the token subject

    Raises:
        MissingToken: If there is no Authorization header
        EmptyHeader: If the header is blank
        InvalidToken: If the header is not a valid bearer token
        Unauthorized: If the token subject no longer exists
    """
    header = request.headers.get("Authorization")
    if header is None:
        raise MissingToken()
    if not header.strip():
        raise EmptyHeader()
    if credentials is None:
        raise InvalidToken()

    try:
        claims = AuthService().validate_access_token(credentials.credentials)
    except JWTError as e:
        logger.warning("bearer_token_rejected", reason=str(e))
        raise InvalidToken() from e

    result = await UserService().get_by_username(claims.sub)
    if result is None:
        logger.warning("bearer_token_unknown_subject", username=claims.sub)
        raise Unauthorized()

    user, _ = result
    return user


async def get_access(current_user: User = Depends(get_current_user)) -> AccessPolicy:
    """Access policy for the current user; the account must be active."""
    return AccessPolicy(current_user).require_active()


async def require_privileged(access: AccessPolicy = Depends(get_access)) -> AccessPolicy:
    """Access policy for an active admin or moderator."""
    return access.require_privileged()
