"""Unit tests for the tickify CLI commands."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from click.testing import CliRunner

from tickify.cli import cli
from tickify.errors import AlreadyExists, DatabaseError
from tickify.models.user import Role, User


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _lifecycle_patches():
    return (
        patch("tickify.database.init_database", new_callable=AsyncMock),
        patch("tickify.database.close_database", new_callable=AsyncMock),
    )


class TestMigrate:
    """Tests for `tickify migrate`."""

    def test_lists_applied(self):
        init, close = _lifecycle_patches()
        with init, close as mock_close, patch(
            "tickify.database.run_migrations",
            new_callable=AsyncMock,
            return_value=["0001_add_users_table.sql"],
        ):
            result = CliRunner().invoke(cli, ["migrate"])

        assert result.exit_code == 0
        assert "Applied 0001_add_users_table.sql" in result.output
        mock_close.assert_awaited_once()

    def test_nothing_pending(self):
        init, close = _lifecycle_patches()
        with init, close, patch("tickify.database.run_migrations", new_callable=AsyncMock, return_value=[]):
            result = CliRunner().invoke(cli, ["migrate"])

        assert result.exit_code == 0
        assert "No pending migrations." in result.output

    def test_failure_exits_nonzero(self):
        init, close = _lifecycle_patches()
        with init, close as mock_close, patch(
            "tickify.database.run_migrations",
            new_callable=AsyncMock,
            side_effect=DatabaseError("syntax error"),
        ):
            result = CliRunner().invoke(cli, ["migrate"])

        assert result.exit_code == 1
        mock_close.assert_awaited_once()


class TestCreateSuperuser:
    """Tests for `tickify create-superuser`."""

    def test_creates_admin(self):
        now = datetime.now(timezone.utc)
        created = User(id=uuid4(), username="root", role=Role.ADMIN, created_at=now, updated_at=now)
        init, close = _lifecycle_patches()
        with (
            init,
            close,
            patch("tickify.services.validation.is_unique", new_callable=AsyncMock),
            patch("tickify.services.user_service.UserService.create_user", new_callable=AsyncMock) as mock_create,
        ):
            mock_create.return_value = created
            result = CliRunner().invoke(cli, ["create-superuser", "-u", "root", "-p", "super-secret"])

        assert result.exit_code == 0
        assert f"Superuser created! ID: {created.id}" in result.output
        request = mock_create.call_args[0][0]
        assert request.role == Role.ADMIN
        assert request.username == "root"

    def test_taken_username(self):
        init, close = _lifecycle_patches()
        with (
            init,
            close,
            patch(
                "tickify.services.validation.is_unique",
                new_callable=AsyncMock,
                side_effect=AlreadyExists(),
            ),
        ):
            result = CliRunner().invoke(cli, ["create-superuser"])

        assert result.exit_code == 1

    def test_invalid_password(self):
        result = CliRunner().invoke(cli, ["create-superuser", "-p", "short"])
        assert result.exit_code == 2
