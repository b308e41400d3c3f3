"""Shared response payloads."""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel


class IdResponse(BaseModel):
    """Identifier of a created or updated entity."""

    id: UUID


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every ApiError.

    Attributes:
        code: Stable machine-readable error code (e.g. NOT_FOUND)
        message: Human-readable summary
        details: Extra context; per-field messages for validation errors
    """

    code: str
    message: str
    details: Optional[Any] = None


class MigrationResult(BaseModel):
    """Outcome of applying pending migrations."""

    message: str
    applied: list[str]
