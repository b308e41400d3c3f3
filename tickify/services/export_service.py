"""Ticket export to PDF and CSV."""

import csv
import io
from datetime import datetime
from typing import Iterable, NamedTuple, Optional

import structlog
from reportlab.pdfgen import canvas

from tickify.errors import ExportError
from tickify.models.ticket import TicketPublic, TicketView

logger = structlog.get_logger(__name__)

NULL = "null"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

PAGE_SIZE = (595, 842)  # A4 in points
REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

CSV_HEADER = (
    "Ticket",
    "Updated at",
    "Requester",
    "Created at",
    "Status",
    "Title",
    "Description",
    "Closed by",
    "Closed at",
    "Solution",
)


class _Text(NamedTuple):
    font: str
    size: int
    x: int
    y: int


# (view field, label, label placement, value placement)
PDF_LAYOUT = (
    ("updated_at", "Updated at:", _Text(BOLD_FONT, 10, 400, 820), _Text(REGULAR_FONT, 10, 460, 820)),
    ("id", "Ticket", _Text(REGULAR_FONT, 16, 50, 785), _Text(BOLD_FONT, 17, 100, 785)),
    ("requester", "Requester:", _Text(BOLD_FONT, 12, 50, 750), _Text(REGULAR_FONT, 12, 120, 750)),
    ("created_at", "Created at:", _Text(BOLD_FONT, 12, 50, 700), _Text(REGULAR_FONT, 12, 120, 700)),
    ("status", "Status:", _Text(BOLD_FONT, 12, 375, 750), _Text(REGULAR_FONT, 12, 420, 750)),
    ("title", "Title:", _Text(BOLD_FONT, 12, 50, 720), _Text(REGULAR_FONT, 12, 86, 720)),
    ("description", "Description:", _Text(BOLD_FONT, 12, 50, 675), _Text(REGULAR_FONT, 11, 50, 660)),
    ("closed_by", "Closed by:", _Text(BOLD_FONT, 12, 50, 560), _Text(REGULAR_FONT, 12, 120, 560)),
    ("closed_at", "Closed at:", _Text(BOLD_FONT, 12, 375, 560), _Text(REGULAR_FONT, 12, 440, 560)),
    ("solution", "Solution:", _Text(BOLD_FONT, 12, 50, 540), _Text(REGULAR_FONT, 11, 110, 540)),
)


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime(TIME_FORMAT) if value is not None else NULL


def build_ticket_view(ticket: TicketPublic) -> TicketView:
    """Format every field of a ticket as a display string.

    Users that cannot be resolved and absent optional fields render as
    the literal "null" instead of failing the export.
    """
    return TicketView(
        id=str(ticket.id),
        title=ticket.title,
        description=ticket.description,
        requester=ticket.requester.username if ticket.requester else NULL,
        status=ticket.status.label,
        closed_by=ticket.closed_by.username if ticket.closed_by else NULL,
        solution=ticket.solution if ticket.solution is not None else NULL,
        created_at=_format_time(ticket.created_at),
        updated_at=_format_time(ticket.updated_at),
        closed_at=_format_time(ticket.closed_at),
    )


def render_ticket_pdf(view: TicketView) -> bytes:
    """Render a single-page PDF with the ticket's label/value pairs.

    Text is placed at fixed coordinates and is not wrapped.

    Raises:
        ExportError: If the document cannot be generated
    """
    buffer = io.BytesIO()

    try:
        pdf = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
        pdf.setTitle(f"Ticket {view.id}")

        for field, label, label_at, value_at in PDF_LAYOUT:
            pdf.setFont(label_at.font, label_at.size)
            pdf.drawString(label_at.x, label_at.y, label)
            pdf.setFont(value_at.font, value_at.size)
            pdf.drawString(value_at.x, value_at.y, getattr(view, field))

        pdf.showPage()
        pdf.save()
    except Exception as e:
        logger.error("pdf_export_failed", ticket_id=view.id, error=str(e))
        raise ExportError(f"Failed to generate PDF: {e}") from e

    return buffer.getvalue()


def render_tickets_csv(views: Iterable[TicketView]) -> bytes:
    """Render tickets as UTF-8 CSV with a fixed 10-column header.

    Raises:
        ExportError: If a row cannot be written
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    try:
        writer.writerow(CSV_HEADER)
        for view in views:
            writer.writerow(
                (
                    view.id,
                    view.updated_at,
                    view.requester,
                    view.created_at,
                    view.status,
                    view.title,
                    view.description,
                    view.closed_by,
                    view.closed_at,
                    view.solution,
                )
            )
    except csv.Error as e:
        logger.error("csv_export_failed", error=str(e))
        raise ExportError(f"Failed to generate CSV: {e}") from e

    return buffer.getvalue().encode("utf-8")
