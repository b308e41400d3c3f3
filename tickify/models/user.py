"""User models and user request payloads with validation."""

import re
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Role(str, Enum):
    """Valid user roles."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Valid account states. Only active users may authenticate or act."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class User(BaseModel):
    """A registered user. Never carries the password hash."""

    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime
    updated_at: datetime


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is not None and not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email")
    return v


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Password cannot be empty or whitespace only")
    # bcrypt only accepts the first 72 bytes
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes long")
    return v


class RegisterRequest(BaseModel):
    """Self-service registration payload.

    Attributes:
        username: Unique username (3-20 chars)
        email: Optional email address
        password: Plain-text password (8-100 chars)
        first_name: Optional first name (3-20 chars)
        last_name: Optional last name (3-20 chars)
    """

    username: str = Field(..., min_length=3, max_length=20)
    email: Optional[str] = None
    password: str = Field(..., min_length=8, max_length=100)
    first_name: Optional[str] = Field(default=None, min_length=3, max_length=20)
    last_name: Optional[str] = Field(default=None, min_length=3, max_length=20)

    @field_validator("email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        """Ensure email looks like an address when provided."""
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        """Ensure password is not empty or whitespace only."""
        return _check_password(v)


class CreateUserRequest(RegisterRequest):
    """Privileged user creation payload; may set role and status."""

    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE


class UpdateUserRequest(BaseModel):
    """Partial update of a user.

    Only fields present in the request body are written. Sending null clears
    email, first_name or last_name; the other fields cannot be null.
    """

    id: UUID
    username: Optional[str] = Field(default=None, min_length=3, max_length=20)
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=100)
    first_name: Optional[str] = Field(default=None, min_length=3, max_length=20)
    last_name: Optional[str] = Field(default=None, min_length=3, max_length=20)
    role: Optional[Role] = None
    status: Optional[UserStatus] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        """Ensure email looks like an address when provided."""
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: Optional[str]) -> Optional[str]:
        """Ensure password is not empty or whitespace only when provided."""
        return _check_password(v)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "UpdateUserRequest":
        """Reject explicit null for columns that cannot be cleared."""
        for name in ("username", "password", "role", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
