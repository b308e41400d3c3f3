"""User management API endpoints (admins and moderators only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
import structlog

from tickify.api.dependencies import require_privileged
from tickify.errors import NotFound
from tickify.models.request import DeleteRequest
from tickify.models.response import IdResponse
from tickify.models.user import CreateUserRequest, UpdateUserRequest, User
from tickify.services.access_policy import AccessPolicy
from tickify.services.user_service import UserService
from tickify.services.validation import EntityKind, exists, is_unique

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/count")
async def count_users(access: AccessPolicy = Depends(require_privileged)) -> int:
    """Total number of users."""
    count = await UserService().count_users()
    logger.info("user_count_retrieved", count=count)
    return count


@router.get("")
async def list_users(access: AccessPolicy = Depends(require_privileged)) -> list[User]:
    """List all users ordered by creation date."""
    return await UserService().list_users()


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    access: AccessPolicy = Depends(require_privileged),
) -> User:
    """Get a user by id.

    Raises:
        NotFound: If no user has the id
    """
    user = await UserService().get_by_id(user_id)
    if user is None:
        logger.warning("user_not_found", user_id=str(user_id))
        raise NotFound()
    return user


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    access: AccessPolicy = Depends(require_privileged),
) -> IdResponse:
    """Create a user with any role and status.

    Raises:
        AlreadyExists: If the username is taken
    """
    await is_unique(request.username)

    user = await UserService().create_user(request)

    logger.info(
        "privileged_created_user",
        actor=access.user.username,
        new_user_id=str(user.id),
    )
    return IdResponse(id=user.id)


@router.put("")
async def update_user(
    request: UpdateUserRequest,
    access: AccessPolicy = Depends(require_privileged),
) -> IdResponse:
    """Apply a partial update to a user.

    Raises:
        NotFound: If the user does not exist
        NotModified: If no field was supplied
    """
    await exists(EntityKind.USER, request.id)

    user_id = await UserService().update_user(request)

    logger.info("privileged_updated_user", actor=access.user.username, user_id=str(user_id))
    return IdResponse(id=user_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    request: DeleteRequest,
    access: AccessPolicy = Depends(require_privileged),
) -> None:
    """Delete a user.

    Raises:
        NotFound: If the user does not exist
    """
    await exists(EntityKind.USER, request.id)

    await UserService().delete_user(request.id)

    logger.info("privileged_deleted_user", actor=access.user.username, user_id=str(request.id))
