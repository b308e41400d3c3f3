"""Ticket API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
import structlog

from tickify.api.dependencies import get_access, require_privileged
from tickify.errors import NotFound
from tickify.models.request import DeleteRequest
from tickify.models.response import IdResponse
from tickify.models.ticket import CreateTicketRequest, TicketPublic, UpdateTicketRequest
from tickify.services.access_policy import AccessPolicy
from tickify.services.ticket_service import TicketService
from tickify.services.validation import EntityKind, exists

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.get("/count")
async def count_tickets(access: AccessPolicy = Depends(require_privileged)) -> int:
    """Total number of tickets."""
    count = await TicketService().count_tickets()
    logger.info("ticket_count_retrieved", count=count)
    return count


@router.get("")
async def list_tickets(
    access: AccessPolicy = Depends(require_privileged),
) -> list[TicketPublic]:
    """List all tickets with requester and closer details."""
    return await TicketService().list_tickets()


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: UUID,
    access: AccessPolicy = Depends(require_privileged),
) -> TicketPublic:
    """Get a ticket by id.

    Raises:
        NotFound: If no ticket has the id
    """
    ticket = await TicketService().get_by_id(ticket_id)
    if ticket is None:
        logger.warning("ticket_not_found", ticket_id=str(ticket_id))
        raise NotFound()
    return ticket


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    request: CreateTicketRequest,
    access: AccessPolicy = Depends(get_access),
) -> IdResponse:
    """Open a ticket.

    Regular users always open tickets for themselves; admins and moderators
    may name another requester by username.

    Raises:
        NotFound: If the requester username is unknown
    """
    requester = access.resolve_requester(request.requester)

    ticket = await TicketService().create_ticket(request, requester)

    return IdResponse(id=ticket.id)


@router.put("")
async def update_ticket(
    request: UpdateTicketRequest,
    access: AccessPolicy = Depends(get_access),
) -> IdResponse:
    """Apply a partial update to a ticket.

    Regular users may only change title and description; any other field
    they send is ignored.

    Raises:
        NotFound: If the ticket does not exist
        NotModified: If no permitted field was supplied
    """
    request = access.filter_ticket_update(request)

    await exists(EntityKind.TICKET, request.id)

    ticket_id = await TicketService().update_ticket(request)

    return IdResponse(id=ticket_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(
    request: DeleteRequest,
    access: AccessPolicy = Depends(require_privileged),
) -> None:
    """Delete a ticket.

    Raises:
        NotFound: If the ticket does not exist
    """
    await exists(EntityKind.TICKET, request.id)

    await TicketService().delete_ticket(request.id)

    logger.info("privileged_deleted_ticket", actor=access.user.username, ticket_id=str(request.id))
