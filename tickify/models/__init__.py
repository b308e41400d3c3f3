"""Models package exports."""

from tickify.models.auth import LoginRequest, TokenClaims, TokenResponse, VerifyTokenRequest
from tickify.models.request import DeleteRequest
from tickify.models.response import ErrorResponse, IdResponse, MessageResponse, MigrationResult
from tickify.models.status import DatabaseStatus, Dependencies, StatusResponse
from tickify.models.ticket import (
    TERMINAL_STATUSES,
    CreateTicketRequest,
    RequesterInfo,
    Ticket,
    TicketPublic,
    TicketStatus,
    TicketView,
    UpdateTicketRequest,
)
from tickify.models.user import (
    CreateUserRequest,
    RegisterRequest,
    Role,
    UpdateUserRequest,
    User,
    UserStatus,
)

__all__ = [
    "CreateTicketRequest",
    "CreateUserRequest",
    "DatabaseStatus",
    "DeleteRequest",
    "Dependencies",
    "ErrorResponse",
    "IdResponse",
    "LoginRequest",
    "MessageResponse",
    "MigrationResult",
    "RegisterRequest",
    "RequesterInfo",
    "Role",
    "StatusResponse",
    "TERMINAL_STATUSES",
    "Ticket",
    "TicketPublic",
    "TicketStatus",
    "TicketView",
    "TokenClaims",
    "TokenResponse",
    "UpdateTicketRequest",
    "UpdateUserRequest",
    "User",
    "UserStatus",
    "VerifyTokenRequest",
]
