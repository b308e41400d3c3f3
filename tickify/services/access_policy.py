"""Role and status based access policy for authenticated users."""

from typing import Optional

import structlog

from tickify.errors import Unauthorized
from tickify.models.ticket import UpdateTicketRequest
from tickify.models.user import Role, User, UserStatus

logger = structlog.get_logger(__name__)

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})

# Ticket fields only privileged users may change
PRIVILEGED_TICKET_FIELDS = frozenset({"status", "requester", "closed_by", "solution"})


class AccessPolicy:
    """Authorization decisions for one authenticated user.

    Failures always raise Unauthorized without saying which check failed.
    """

    def __init__(self, user: User):
        self.user = user

    @property
    def is_privileged(self) -> bool:
        """Whether the user is an admin or a moderator."""
        return self.user.role in PRIVILEGED_ROLES

    def require_active(self) -> "AccessPolicy":
        """Ensure the account is active."""
        if self.user.status != UserStatus.ACTIVE:
            logger.warning("access_denied_inactive", username=self.user.username)
            raise Unauthorized()
        return self

    def require_privileged(self) -> "AccessPolicy":
        """Ensure the account is active and holds a privileged role."""
        self.require_active()
        if not self.is_privileged:
            logger.warning(
                "access_denied_role",
                username=self.user.username,
                role=self.user.role.value,
            )
            raise Unauthorized()
        return self

    def resolve_requester(self, requested: Optional[str]) -> str:
        """Pick the username a new ticket is filed under.

        Non-privileged users always file for themselves, whatever they sent.
        Privileged users may file for someone else.
        """
        if self.is_privileged and requested is not None:
            return requested
        return self.user.username

    def filter_ticket_update(self, request: UpdateTicketRequest) -> UpdateTicketRequest:
        """Drop the fields the user may not change from a ticket patch.

        Stripped fields become no-ops rather than errors.
        """
        if self.is_privileged:
            return request

        allowed = request.model_fields_set - PRIVILEGED_TICKET_FIELDS
        stripped = request.model_fields_set & PRIVILEGED_TICKET_FIELDS
        if stripped:
            logger.info(
                "ticket_update_fields_stripped",
                username=self.user.username,
                fields=sorted(stripped),
            )
        return UpdateTicketRequest(**request.model_dump(include=allowed | {"id"}))
