"""Ticket export endpoints returning PDF and CSV downloads."""

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import Response
import structlog

from tickify.api.dependencies import require_privileged
from tickify.errors import NotFound
from tickify.models.ticket import TicketPublic
from tickify.services.access_policy import AccessPolicy
from tickify.services.export_service import (
    build_ticket_view,
    render_ticket_pdf,
    render_tickets_csv,
)
from tickify.services.ticket_service import TicketService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/export", tags=["Export"])


def _download(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _find_ticket(ticket_id: UUID) -> TicketPublic:
    ticket = await TicketService().get_by_id(ticket_id)
    if ticket is None:
        logger.warning("export_ticket_not_found", ticket_id=str(ticket_id))
        raise NotFound()
    return ticket


@router.get("/pdf/ticket/{ticket_id}")
async def ticket_to_pdf(
    ticket_id: UUID,
    access: AccessPolicy = Depends(require_privileged),
) -> Response:
    """Download a ticket as a one-page PDF."""
    ticket = await _find_ticket(ticket_id)
    pdf = render_ticket_pdf(build_ticket_view(ticket))

    logger.info("ticket_exported", ticket_id=str(ticket_id), format="pdf")
    return _download(pdf, "application/pdf", "Ticket.pdf")


@router.get("/csv/ticket/{ticket_id}")
async def ticket_to_csv(
    ticket_id: UUID,
    access: AccessPolicy = Depends(require_privileged),
) -> Response:
    """Download a ticket as CSV."""
    ticket = await _find_ticket(ticket_id)
    content = render_tickets_csv([build_ticket_view(ticket)])

    logger.info("ticket_exported", ticket_id=str(ticket_id), format="csv")
    return _download(content, "text/csv; charset=utf-8", "Ticket.csv")


@router.get("/csv/tickets")
async def tickets_to_csv(access: AccessPolicy = Depends(require_privileged)) -> Response:
    """Download every ticket as CSV."""
    tickets = await TicketService().list_tickets()
    content = render_tickets_csv(build_ticket_view(t) for t in tickets)

    logger.info("tickets_exported", count=len(tickets), format="csv")
    return _download(content, "text/csv; charset=utf-8", "Tickets.csv")
