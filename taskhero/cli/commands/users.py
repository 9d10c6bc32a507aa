"""
taskhero users command - Profile and role management CLI.
"""

from uuid import UUID

import typer
from rich.table import Table

from ...auth.models import UserRole
from .common import EmailOption, PasswordOption, console, run_async, signed_in

app = typer.Typer(help="Manage users and roles")


@app.command("list")
def users_list_command(
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """
    List all users.

    Example:
        $ taskhero users list --email admin@example.com
    """

    async def _list():
        async with signed_in(email, password) as (taskhero, session):
            profiles = await taskhero.profiles.list(session)

        if not profiles:
            console.print("[yellow]No users found[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("Email", style="cyan")
        table.add_column("Role")
        table.add_column("Joined", style="yellow")
        table.add_column("ID", style="dim")

        for profile in profiles:
            role = f"[magenta]{profile.role.value}[/magenta]" if profile.is_admin else profile.role.value
            table.add_row(profile.email, role, profile.created_at.strftime("%Y-%m-%d"), str(profile.id))

        console.print(table)

    run_async(_list())


@app.command("set-role")
def users_set_role_command(
    user_id: UUID = typer.Argument(..., help="User ID"),
    role: UserRole = typer.Argument(..., help="New role"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Change another user's role."""

    async def _set_role():
        async with signed_in(email, password) as (taskhero, session):
            profile = await taskhero.profiles.update_role(session, user_id, role)
        console.print(f"[green]✓[/green] {profile.email} is now {profile.role.value}")

    run_async(_set_role())


@app.command("delete")
def users_delete_command(
    user_id: UUID = typer.Argument(..., help="User ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Delete a user's profile."""
    if not yes:
        typer.confirm(f"Delete user {user_id}?", abort=True)

    async def _delete():
        async with signed_in(email, password) as (taskhero, session):
            await taskhero.profiles.delete(session, user_id)
        console.print(f"[green]✓[/green] User {user_id} deleted")

    run_async(_delete())
