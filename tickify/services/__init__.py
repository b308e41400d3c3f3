"""Services package exports."""

from tickify.services.access_policy import PRIVILEGED_ROLES, AccessPolicy
from tickify.services.auth_service import AuthService
from tickify.services.logging_service import configure_logging, get_logger
from tickify.services.ticket_service import TicketService
from tickify.services.user_service import UserService

__all__ = [
    "AccessPolicy",
    "AuthService",
    "PRIVILEGED_ROLES",
    "TicketService",
    "UserService",
    "configure_logging",
    "get_logger",
]
