"""Existence and uniqueness prechecks run before mutations.

These are plain lookups without locks; a concurrent delete or insert can land
between the check and the mutation that follows it.
"""

from enum import Enum
from uuid import UUID

import structlog

from tickify.database import get_pool
from tickify.errors import AlreadyExists, NotFound

logger = structlog.get_logger(__name__)


class EntityKind(str, Enum):
    """Entities that can be looked up, mapped to their table."""

    USER = "users"
    TICKET = "tickets"


async def exists(kind: EntityKind, entity_id: UUID) -> None:
    """Ensure a row with the given id exists.

    Raises:
        NotFound: If no row matches
    """
    pool = await get_pool()

    async with pool.acquire() as conn:
        found = await conn.fetchval(
            f"SELECT id FROM {kind.value} WHERE id = $1",
            entity_id,
        )

    if found is None:
        logger.warning("entity_not_found", kind=kind.name.lower(), entity_id=str(entity_id))
        raise NotFound()


async def is_unique(username: str) -> None:
    """Ensure no user already has the username.

    Raises:
        AlreadyExists: If the username is taken
    """
    pool = await get_pool()

    async with pool.acquire() as conn:
        found = await conn.fetchval("SELECT id FROM users WHERE username = $1", username)

    if found is not None:
        logger.warning("username_already_exists", username=username)
        raise AlreadyExists()
