"""Ticket models and ticket request payloads with validation."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TicketStatus(str, Enum):
    """Valid ticket states."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    REOPENED = "reopened"
    PAUSED = "paused"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        """Human-readable status used in exports."""
        return self.value.replace("_", " ").capitalize()


TERMINAL_STATUSES = frozenset({TicketStatus.CLOSED, TicketStatus.CANCELLED})


class Ticket(BaseModel):
    """A ticket row as stored."""

    id: UUID
    title: str
    description: str
    requester: UUID
    status: TicketStatus = TicketStatus.OPEN
    closed_by: Optional[UUID] = None
    solution: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None


class RequesterInfo(BaseModel):
    """Public details of a user referenced by a ticket."""

    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class TicketPublic(BaseModel):
    """A ticket with its requester and closer resolved to user details."""

    id: UUID
    title: str
    description: str
    requester: RequesterInfo
    status: TicketStatus
    closed_by: Optional[RequesterInfo] = None
    solution: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None


class TicketView(BaseModel):
    """Fully formatted ticket, every field a display string, for exports."""

    id: str
    title: str
    description: str
    requester: str
    status: str
    closed_by: str
    solution: str
    created_at: str
    updated_at: str
    closed_at: str


class CreateTicketRequest(BaseModel):
    """Ticket creation payload.

    Attributes:
        title: Short summary (3-50 chars)
        description: Problem description (10-3000 chars)
        requester: Username of the owner; only honored for privileged callers
    """

    title: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=3000)
    requester: Optional[str] = None


class UpdateTicketRequest(BaseModel):
    """Partial update of a ticket.

    Only fields present in the request body are written. Sending null clears
    closed_by or solution; the other fields cannot be null.
    """

    id: UUID
    title: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, min_length=10, max_length=3000)
    requester: Optional[UUID] = None
    status: Optional[TicketStatus] = None
    closed_by: Optional[UUID] = None
    solution: Optional[str] = Field(default=None, min_length=10, max_length=3000)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "UpdateTicketRequest":
        """Reject explicit null for columns that cannot be cleared."""
        for name in ("title", "description", "requester", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
