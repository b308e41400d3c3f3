"""Shared request payloads."""

from uuid import UUID

from pydantic import BaseModel


class DeleteRequest(BaseModel):
    """Identifies the entity to delete."""

    id: UUID
