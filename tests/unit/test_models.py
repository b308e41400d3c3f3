"""Unit tests for Pydantic models."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from tickify.models.auth import LoginRequest
from tickify.models.ticket import CreateTicketRequest, TicketStatus, UpdateTicketRequest
from tickify.models.user import (
    CreateUserRequest,
    RegisterRequest,
    Role,
    UpdateUserRequest,
    UserStatus,
)


class TestRegisterRequest:
    """Tests for RegisterRequest validation."""

    def test_minimal_payload(self):
        request = RegisterRequest(username="alice", password="wonderland")
        assert request.email is None
        assert request.first_name is None

    @pytest.mark.parametrize("username", ["al", "a" * 21])
    def test_username_length(self, username):
        with pytest.raises(ValidationError):
            RegisterRequest(username=username, password="wonderland")

    @pytest.mark.parametrize("password", ["short", "x" * 101])
    def test_password_length(self, password):
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", password=password)

    def test_whitespace_password_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(username="alice", password="          ")
        assert "whitespace" in str(exc_info.value).lower()

    def test_password_over_bcrypt_limit_fails(self):
        """Multi-byte characters count against the 72 byte limit."""
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", password="é" * 40)

    def test_invalid_email_fails(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", password="wonderland", email="not-an-email")

    def test_short_first_name_fails(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", password="wonderland", first_name="Al")

    def test_registration_ignores_role(self):
        request = RegisterRequest(username="alice", password="wonderland", role="admin")
        assert not hasattr(request, "role")


class TestCreateUserRequest:
    """Tests for privileged user creation payloads."""

    def test_defaults(self):
        request = CreateUserRequest(username="alice", password="wonderland")
        assert request.role == Role.USER
        assert request.status == UserStatus.ACTIVE

    def test_unknown_role_fails(self):
        with pytest.raises(ValidationError):
            CreateUserRequest(username="alice", password="wonderland", role="root")


class TestUpdateUserRequest:
    """Tests for UpdateUserRequest tri-state fields."""

    def test_absent_fields_not_set(self):
        request = UpdateUserRequest(id=uuid4(), first_name="Alice")
        assert request.model_fields_set == {"id", "first_name"}

    def test_null_clears_optional_field(self):
        request = UpdateUserRequest(id=uuid4(), email=None)
        assert "email" in request.model_fields_set
        assert request.email is None

    @pytest.mark.parametrize("field", ["username", "password", "role", "status"])
    def test_null_rejected_for_required_columns(self, field):
        with pytest.raises(ValidationError):
            UpdateUserRequest(id=uuid4(), **{field: None})

    def test_id_required(self):
        with pytest.raises(ValidationError):
            UpdateUserRequest(username="alice")


class TestTicketRequests:
    """Tests for ticket payload validation."""

    def test_create_bounds(self):
        with pytest.raises(ValidationError):
            CreateTicketRequest(title="ab", description="Long enough description")
        with pytest.raises(ValidationError):
            CreateTicketRequest(title="Printer", description="too short")

    def test_create_requester_optional(self):
        assert CreateTicketRequest(title="Printer", description="Out of toner again").requester is None

    def test_update_status_values(self):
        request = UpdateTicketRequest(id=uuid4(), status="in_progress")
        assert request.status == TicketStatus.IN_PROGRESS

    def test_update_unknown_status_fails(self):
        with pytest.raises(ValidationError):
            UpdateTicketRequest(id=uuid4(), status="inprogress")

    @pytest.mark.parametrize("field", ["title", "description", "requester", "status"])
    def test_null_rejected_for_required_columns(self, field):
        with pytest.raises(ValidationError):
            UpdateTicketRequest(id=uuid4(), **{field: None})

    @pytest.mark.parametrize("field", ["closed_by", "solution"])
    def test_null_allowed_for_clearable_columns(self, field):
        request = UpdateTicketRequest(id=uuid4(), **{field: None})
        assert field in request.model_fields_set

    def test_short_solution_fails(self):
        with pytest.raises(ValidationError):
            UpdateTicketRequest(id=uuid4(), solution="Fixed")


class TestLoginRequest:
    """Tests for LoginRequest validation."""

    def test_short_password_fails(self):
        with pytest.raises(ValidationError):
            LoginRequest(username="alice", password="short")


class TestTicketStatusLabel:
    """Tests for human-readable status labels."""

    @pytest.mark.parametrize(
        "status,label",
        [
            (TicketStatus.OPEN, "Open"),
            (TicketStatus.IN_PROGRESS, "In progress"),
            (TicketStatus.CANCELLED, "Cancelled"),
        ],
    )
    def test_label(self, status, label):
        assert status.label == label
