"""FastAPI application initialization."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import asyncpg
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from tickify import __version__
from tickify.api import (
    RequestLoggingMiddleware,
    auth_router,
    export_router,
    status_router,
    tickets_router,
    users_router,
)
from tickify.config import get_settings
from tickify.errors import ApiError, DatabaseError, NotModified, ValidationError
from tickify.models.response import ErrorResponse
from tickify.services.logging_service import configure_logging, get_logger

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    startup_logger = get_logger("main")

    try:
        from tickify.database import init_database, run_migrations

        await init_database()
        if settings.run_migrations_on_startup:
            await run_migrations()
        startup_logger.info("database_initialized")
    except Exception as e:
        startup_logger.warning(
            "database_initialization_failed",
            error=str(e),
            note="Continuing without database - requests touching storage will fail",
        )

    startup_logger.info("application_started", version=__version__, log_level=settings.log_level)

    yield

    from tickify.database import close_database

    await close_database()
    startup_logger.info("application_shutdown")


ERROR_RESPONSES = {
    304: {"description": "No fields were supplied; the body is empty"},
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

settings = get_settings()

app = FastAPI(
    title="Tickify API",
    description="Support ticketing backend with JWT authentication and ticket exports",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> Response:
    """Render an ApiError as {code, message, details} with its status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("api_error", code=exc.code, status_code=exc.status_code, path=request.url.path)

    # A 304 response cannot carry a body
    if isinstance(exc, NotModified):
        return Response(status_code=exc.status_code)

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a ValidationError with per-field messages."""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        details.append(f"{field}: {error.get('msg', 'Validation failed')}")

    return await api_error_handler(request, ValidationError(details))


@app.exception_handler(asyncpg.PostgresError)
async def database_exception_handler(
    request: Request, exc: asyncpg.PostgresError
) -> JSONResponse:
    """Render unhandled driver errors as a DatabaseError."""
    logger.error("database_error", error=str(exc), path=request.url.path)
    return await api_error_handler(request, DatabaseError(str(exc)))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
app.include_router(users_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
app.include_router(tickets_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
app.include_router(export_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
app.include_router(status_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
