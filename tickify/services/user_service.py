"""User management service."""

from datetime import datetime, timezone
from typing import Optional, Union
from uuid import UUID, uuid4

import asyncpg
import structlog

from tickify.database import get_pool
from tickify.errors import AlreadyExists, NotFound, NotModified
from tickify.models.user import (
    CreateUserRequest,
    RegisterRequest,
    Role,
    UpdateUserRequest,
    User,
    UserStatus,
)
from tickify.services.auth_service import AuthService
from tickify.services.partial_update import UpdateBuilder

logger = structlog.get_logger(__name__)

USER_COLUMNS = "id, username, email, first_name, last_name, role, status, created_at, updated_at"

# Patchable columns written as-is; password is hashed separately
UPDATABLE_COLUMNS = ("username", "email", "first_name", "last_name", "role", "status")


def _user_from_row(row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        role=row["role"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserService:
    """Service for user CRUD operations."""

    def __init__(self, auth_service: Optional[AuthService] = None):
        self.auth_service = auth_service or AuthService()

    async def count_users(self) -> int:
        """Count total number of users."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM users")

        return count

    async def list_users(self) -> list[User]:
        """Return all users ordered by creation date."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at ASC"
            )

        return [_user_from_row(row) for row in rows]

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by UUID.

        Args:
            user_id: User UUID

        Returns:
            User model or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
                user_id,
            )

        if row is None:
            return None
        return _user_from_row(row)

    async def get_by_username(self, username: str) -> Optional[tuple[User, str]]:
        """Get a user and their password hash by username.

        Args:
            username: Username to look up

        Returns:
            Tuple of (User, password_hash) or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE username = $1",
                username,
            )

        if row is None:
            return None
        return _user_from_row(row), row["password_hash"]

    async def create_user(self, request: Union[RegisterRequest, CreateUserRequest]) -> User:
        """Create a new user with a hashed password.

        Registration payloads get the default role and status; privileged
        creation payloads may set both.

        Args:
            request: Validated user payload

        Returns:
            Created User model

        Raises:
            AlreadyExists: If the store rejects a duplicate username or email
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)
        role = getattr(request, "role", Role.USER)
        status = getattr(request, "status", UserStatus.ACTIVE)
        password_hash = self.auth_service.hash_password(request.password)

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO users (id, username, email, password_hash, first_name, last_name, role, status, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                    """,
                    user_id,
                    request.username,
                    request.email,
                    password_hash,
                    request.first_name,
                    request.last_name,
                    role.value,
                    status.value,
                    now,
                    now,
                )
        except asyncpg.UniqueViolationError as e:
            logger.warning("user_create_duplicate", username=request.username)
            raise AlreadyExists() from e

        logger.info(
            "user_created",
            user_id=str(user_id),
            username=request.username,
            role=role.value,
        )

        return User(
            id=user_id,
            username=request.username,
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            role=role,
            status=status,
            created_at=now,
            updated_at=now,
        )

    async def update_user(self, request: UpdateUserRequest) -> UUID:
        """Apply a partial update to a user.

        Only supplied fields are written, in a single statement that also
        stamps updated_at.

        Args:
            request: Patch with the target id and the fields to change

        Returns:
            The user id

        Raises:
            NotFound: If the user does not exist
            NotModified: If no field was supplied
            AlreadyExists: If the new username or email is taken
        """
        builder = UpdateBuilder("users").set_supplied(request, UPDATABLE_COLUMNS)
        if "password" in request.model_fields_set:
            builder.set("password_hash", self.auth_service.hash_password(request.password))

        pool = await get_pool()

        async with pool.acquire() as conn:
            async with conn.transaction():
                exists = await conn.fetchval(
                    "SELECT id FROM users WHERE id = $1 FOR UPDATE",
                    request.id,
                )
                if exists is None:
                    raise NotFound()

                if not builder.changed:
                    raise NotModified()

                fields_updated = builder.columns
                builder.set("updated_at", datetime.now(timezone.utc))
                query, params = builder.build(request.id)

                try:
                    await conn.execute(query, *params)
                except asyncpg.UniqueViolationError as e:
                    logger.warning("user_update_duplicate", user_id=str(request.id))
                    raise AlreadyExists() from e

        logger.info(
            "user_updated",
            user_id=str(request.id),
            fields_updated=fields_updated,
        )
        return request.id

    async def delete_user(self, user_id: UUID) -> bool:
        """Hard-delete a user. Deleting a missing id is a no-op.

        Args:
            user_id: UUID of the user to delete

        Returns:
            True if a row was deleted, False otherwise
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM users WHERE id = $1", user_id)

        deleted = result == "DELETE 1"

        if deleted:
            logger.info("user_deleted", user_id=str(user_id))
        else:
            logger.warning("user_delete_not_found", user_id=str(user_id))

        return deleted
