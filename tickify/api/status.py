"""Service status and schema migration endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
import structlog

from tickify.database import fetch_database_status, run_migrations
from tickify.models.response import MigrationResult
from tickify.models.status import Dependencies, StatusResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Status"])


@router.get("/status")
async def show_status() -> StatusResponse:
    """Report the database version and connection usage."""
    database = await fetch_database_status()

    logger.info("status_queried")
    return StatusResponse(
        updated_at=datetime.now(timezone.utc),
        dependencies=Dependencies(database=database),
    )


@router.post("/migrations", tags=["Migrations"])
async def apply_migrations() -> MigrationResult:
    """Apply pending schema migrations."""
    applied = await run_migrations()

    logger.info("migrations_applied", applied=applied)
    return MigrationResult(message="Migrations applied successfully!", applied=applied)
