"""Ticket management service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from tickify.database import get_pool
from tickify.errors import NotFound, NotModified
from tickify.models.ticket import (
    TERMINAL_STATUSES,
    CreateTicketRequest,
    RequesterInfo,
    Ticket,
    TicketPublic,
    TicketStatus,
    UpdateTicketRequest,
)
from tickify.services.partial_update import UpdateBuilder

logger = structlog.get_logger(__name__)

UPDATABLE_COLUMNS = ("title", "description", "requester", "closed_by", "solution")

TICKET_PUBLIC_SELECT = """
    SELECT
        t.id AS ticket_id,
        t.title,
        t.description,
        t.status,
        t.solution,
        t.created_at,
        t.updated_at,
        t.closed_at,
        u.id AS requester_id,
        u.username AS requester_username,
        u.email AS requester_email,
        u.first_name AS requester_first_name,
        u.last_name AS requester_last_name,
        cb.id AS closed_by_id,
        cb.username AS closed_by_username,
        cb.email AS closed_by_email,
        cb.first_name AS closed_by_first_name,
        cb.last_name AS closed_by_last_name
    FROM tickets t
    JOIN users u ON u.id = t.requester
    LEFT JOIN users cb ON cb.id = t.closed_by
"""


def _user_info(row, prefix: str) -> Optional[RequesterInfo]:
    if row[f"{prefix}_id"] is None:
        return None
    return RequesterInfo(
        id=row[f"{prefix}_id"],
        username=row[f"{prefix}_username"],
        email=row[f"{prefix}_email"],
        first_name=row[f"{prefix}_first_name"],
        last_name=row[f"{prefix}_last_name"],
    )


def _ticket_from_row(row) -> TicketPublic:
    return TicketPublic(
        id=row["ticket_id"],
        title=row["title"],
        description=row["description"],
        requester=_user_info(row, "requester"),
        status=row["status"],
        closed_by=_user_info(row, "closed_by"),
        solution=row["solution"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        closed_at=row["closed_at"],
    )


def stamps_closed_at(previous: TicketStatus, new: TicketStatus) -> bool:
    """Decide whether a status change sets closed_at.

    The previous status is compared with OR, so the guard holds for every
    previous status and re-closing an already closed ticket stamps it again.
    """
    if new not in TERMINAL_STATUSES:
        return False
    return previous != TicketStatus.CLOSED or previous != TicketStatus.CANCELLED


class TicketService:
    """Service for ticket CRUD operations."""

    async def count_tickets(self) -> int:
        """Count total number of tickets."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM tickets")

        return count

    async def list_tickets(self) -> list[TicketPublic]:
        """Return all tickets with requester and closer details."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(f"{TICKET_PUBLIC_SELECT} ORDER BY t.created_at ASC")

        return [_ticket_from_row(row) for row in rows]

    async def get_by_id(self, ticket_id: UUID) -> Optional[TicketPublic]:
        """Get a ticket by UUID.

        Returns:
            TicketPublic or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"{TICKET_PUBLIC_SELECT} WHERE t.id = $1", ticket_id)

        if row is None:
            return None
        return _ticket_from_row(row)

    async def create_ticket(
        self, request: CreateTicketRequest, requester_username: str
    ) -> Ticket:
        """Open a new ticket for the given requester.

        Args:
            request: Validated ticket payload
            requester_username: Owner, already resolved by the access policy

        Returns:
            Created Ticket

        Raises:
            NotFound: If no user has the requester username
        """
        pool = await get_pool()
        now = datetime.now(timezone.utc)

        async with pool.acquire() as conn:
            requester_id = await conn.fetchval(
                "SELECT id FROM users WHERE username = $1",
                requester_username,
            )
            if requester_id is None:
                logger.warning("ticket_requester_not_found", requester=requester_username)
                raise NotFound()

            ticket = Ticket(
                id=uuid4(),
                title=request.title,
                description=request.description,
                requester=requester_id,
                status=TicketStatus.OPEN,
                created_at=now,
                updated_at=now,
            )

            await conn.execute(
                """
                INSERT INTO tickets (id, title, description, requester, status, closed_by, solution, created_at, updated_at, closed_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                """,
                ticket.id,
                ticket.title,
                ticket.description,
                ticket.requester,
                ticket.status.value,
                ticket.closed_by,
                ticket.solution,
                ticket.created_at,
                ticket.updated_at,
                ticket.closed_at,
            )

        logger.info(
            "ticket_created",
            ticket_id=str(ticket.id),
            requester=requester_username,
        )
        return ticket

    async def update_ticket(self, request: UpdateTicketRequest) -> UUID:
        """Apply a partial update to a ticket.

        Only supplied fields are written. A status change into closed or
        cancelled also stamps closed_at; closed_at is never cleared. The
        previous-status read and the write share one transaction.

        Args:
            request: Patch with the target id and the fields to change

        Returns:
            The ticket id

        Raises:
            NotFound: If the ticket, or a referenced user, does not exist
            NotModified: If no field was supplied
        """
        builder = UpdateBuilder("tickets").set_supplied(request, UPDATABLE_COLUMNS)
        pool = await get_pool()

        async with pool.acquire() as conn:
            async with conn.transaction():
                previous_status = await conn.fetchval(
                    "SELECT status FROM tickets WHERE id = $1 FOR UPDATE",
                    request.id,
                )
                if previous_status is None:
                    raise NotFound()

                now = datetime.now(timezone.utc)

                if "status" in request.model_fields_set:
                    builder.set("status", request.status)
                    if stamps_closed_at(TicketStatus(previous_status), request.status):
                        builder.set("closed_at", now)

                if not builder.changed:
                    raise NotModified()

                fields_updated = builder.columns
                builder.set("updated_at", now)
                query, params = builder.build(request.id)

                try:
                    await conn.execute(query, *params)
                except asyncpg.ForeignKeyViolationError as e:
                    logger.warning("ticket_update_unknown_user", ticket_id=str(request.id))
                    raise NotFound() from e

        logger.info(
            "ticket_updated",
            ticket_id=str(request.id),
            fields_updated=fields_updated,
        )
        return request.id

    async def delete_ticket(self, ticket_id: UUID) -> bool:
        """Delete a ticket. Deleting a missing id is a no-op.

        Returns:
            True if a row was deleted, False otherwise
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM tickets WHERE id = $1", ticket_id)

        deleted = result == "DELETE 1"

        if deleted:
            logger.info("ticket_deleted", ticket_id=str(ticket_id))
        else:
            logger.warning("ticket_delete_not_found", ticket_id=str(ticket_id))

        return deleted
