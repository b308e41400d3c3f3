"""Service status models."""

from datetime import datetime

from pydantic import BaseModel


class DatabaseStatus(BaseModel):
    """Snapshot of the relational store."""

    version: str
    max_connections: int
    opened_connections: int


class Dependencies(BaseModel):
    database: DatabaseStatus


class StatusResponse(BaseModel):
    updated_at: datetime
    dependencies: Dependencies
