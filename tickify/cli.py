"""Click CLI commands for running and administering the API."""

from __future__ import annotations

import asyncio
import sys

import click
from pydantic import ValidationError as PydanticValidationError

from tickify.config import get_settings
from tickify.errors import ApiError
from tickify.models.user import CreateUserRequest, Role

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "root@toor"


@click.group()
def cli() -> None:
    """Tickify support-ticketing API."""
    pass


@cli.command()
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(reload: bool) -> None:
    """Run the API server on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("tickify.main:app", host=settings.host, port=settings.port, reload=reload)


@cli.command()
def migrate() -> None:
    """Apply pending database migrations."""
    from tickify.database import close_database, init_database, run_migrations

    async def _run() -> list[str]:
        await init_database()
        try:
            return await run_migrations()
        finally:
            await close_database()

    try:
        applied = asyncio.run(_run())
    except ApiError as e:
        click.echo(f"Migration failed: {e}", err=True)
        sys.exit(1)

    if applied:
        for name in applied:
            click.echo(f"Applied {name}")
    else:
        click.echo("No pending migrations.")


async def _create_superuser(request: CreateUserRequest):
    from tickify.database import close_database, init_database
    from tickify.services.user_service import UserService
    from tickify.services.validation import is_unique

    await init_database()
    try:
        await is_unique(request.username)
        return await UserService().create_user(request)
    finally:
        await close_database()


@cli.command("create-superuser")
@click.option("-u", "--username", default=DEFAULT_USERNAME, show_default=True)
@click.option("-p", "--password", default=DEFAULT_PASSWORD, show_default=True)
def create_superuser(username: str, password: str) -> None:
    """Create an active admin account."""
    try:
        request = CreateUserRequest(username=username, password=password, role=Role.ADMIN)
    except PydanticValidationError as e:
        click.echo(f"Invalid superuser: {e}", err=True)
        sys.exit(2)

    try:
        user = asyncio.run(_create_superuser(request))
    except ApiError as e:
        click.echo(f"Could not create superuser '{username}': {e.message}", err=True)
        sys.exit(1)

    click.echo(f"Superuser created! ID: {user.id}")


if __name__ == "__main__":
    cli()
