"""API package exports."""

from tickify.api.auth import router as auth_router
from tickify.api.export import router as export_router
from tickify.api.middleware import RequestLoggingMiddleware
from tickify.api.status import router as status_router
from tickify.api.tickets import router as tickets_router
from tickify.api.users import router as users_router

__all__ = [
    "RequestLoggingMiddleware",
    "auth_router",
    "export_router",
    "status_router",
    "tickets_router",
    "users_router",
]
