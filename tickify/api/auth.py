"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status
import structlog

from tickify.api.dependencies import get_access
from tickify.errors import NotFound, Unauthorized
from tickify.models.auth import LoginRequest, TokenResponse, VerifyTokenRequest
from tickify.models.response import IdResponse, MessageResponse
from tickify.models.user import RegisterRequest, User, UserStatus
from tickify.services.access_policy import AccessPolicy
from tickify.services.auth_service import AuthService
from tickify.services.user_service import UserService
from tickify.services.validation import is_unique

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(request: LoginRequest) -> TokenResponse:
    """Exchange username and password for a bearer token.

    Raises:
        NotFound: If the username is unknown
        WrongPassword: If the password does not match
        Unauthorized: If the account is inactive
    """
    user_service = UserService()
    auth_service = AuthService()

    result = await user_service.get_by_username(request.username)
    if result is None:
        logger.warning("login_unknown_user", username=request.username)
        raise NotFound()

    user, password_hash = result

    auth_service.verify_password(request.password, password_hash)

    if user.status != UserStatus.ACTIVE:
        logger.warning("login_inactive_user", username=user.username)
        raise Unauthorized()

    token = auth_service.create_access_token(user.username, user.role)

    logger.info("user_logged_in", user_id=str(user.id), username=user.username)
    return TokenResponse(token=token)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest) -> IdResponse:
    """Create a regular, active account.

    Raises:
        AlreadyExists: If the username is taken
    """
    await is_unique(request.username)

    user = await UserService().create_user(request)

    logger.info("user_registered", user_id=str(user.id), username=user.username)
    return IdResponse(id=user.id)


@router.post("/verify")
async def verify(request: VerifyTokenRequest) -> MessageResponse:
    """Check that a token is correctly signed and not expired."""
    AuthService().validate_access_token(request.token)
    logger.info("token_verified")
    return MessageResponse(message="Token is valid!")


@router.get("/me")
async def get_me(access: AccessPolicy = Depends(get_access)) -> User:
    """Get the authenticated user."""
    return access.user
