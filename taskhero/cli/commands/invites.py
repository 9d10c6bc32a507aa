"""
CLI commands for invitation management.
"""

from typing import Optional
from uuid import UUID

import typer
from rich.table import Table

from ...auth.models import UserRole
from ...invitations.models import InvitationStatus
from ...utils.dates import utcnow
from .common import EmailOption, PasswordOption, console, open_app, run_async, signed_in

app = typer.Typer(help="Manage invitations")

STATUS_STYLES = {
    InvitationStatus.ACTIVE: "green",
    InvitationStatus.USED: "blue",
    InvitationStatus.EXPIRED: "red",
}


@app.command("send")
def invites_send_command(
    invitee: str = typer.Argument(..., help="Email address to invite"),
    role: UserRole = typer.Option(UserRole.USER, "--role", "-r", help="Role granted on registration"),
    no_email: bool = typer.Option(False, "--no-email", help="Only print the link, don't send email"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Invite someone by email."""

    async def _send():
        async with signed_in(email, password) as (taskhero, session):
            created = await taskhero.invites.invite(
                session, invitee, role, send_email=not no_email
            )

        console.print(f"[green]✓[/green] Invitation created for {created.invitation.email}")
        console.print(f"  Role: {created.invitation.role.value}")
        console.print(f"  Expires: {created.invitation.expires_at:%Y-%m-%d %H:%M} UTC")
        console.print(f"  Link: [cyan]{created.link}[/cyan]")
        if created.email_sent is False:
            console.print("[yellow]Email could not be sent; share the link manually[/yellow]")

    run_async(_send())


@app.command("list")
def invites_list_command(
    status: Optional[InvitationStatus] = typer.Option(None, "--status", "-s", help="Only this status"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """List invitations, newest first."""

    async def _list():
        async with signed_in(email, password) as (taskhero, session):
            invitations = await taskhero.invites.list(session, status=status)

        if not invitations:
            console.print("[yellow]No invitations found[/yellow]")
            return

        now = utcnow()
        table = Table(title="Invitations")
        table.add_column("Email", style="cyan")
        table.add_column("Role")
        table.add_column("Status")
        table.add_column("Expires", style="yellow")
        table.add_column("ID", style="dim")

        for invitation in invitations:
            state = invitation.status(now)
            table.add_row(
                invitation.email,
                invitation.role.value,
                f"[{STATUS_STYLES[state]}]{state.value}[/{STATUS_STYLES[state]}]",
                invitation.expires_at.strftime("%Y-%m-%d"),
                str(invitation.id),
            )

        console.print(table)

    run_async(_list())


@app.command("delete")
def invites_delete_command(
    invitation_id: UUID = typer.Argument(..., help="Invitation ID to delete"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Permanently delete an invitation."""

    async def _delete():
        async with signed_in(email, password) as (taskhero, session):
            await taskhero.invites.delete(session, invitation_id)
        console.print(f"[green]✓[/green] Invitation {invitation_id} deleted")

    run_async(_delete())


@app.command("resend")
def invites_resend_command(
    invitation_id: UUID = typer.Argument(..., help="Invitation ID to resend"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Email the same link again; the expiry is not extended."""

    async def _resend():
        async with signed_in(email, password) as (taskhero, session):
            delivery = await taskhero.invites.resend_email(session, invitation_id)
        console.print(f"[green]✓[/green] Invitation resent to {delivery.recipient}")

    run_async(_resend())


@app.command("purge")
def invites_purge_command(
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Delete all unused invitations that have expired."""

    async def _purge():
        async with signed_in(email, password) as (taskhero, session):
            deleted = await taskhero.invites.purge_expired(session)
        console.print(f"[green]✓[/green] Purged {deleted} expired invitation(s)")

    run_async(_purge())


@app.command("verify")
def invites_verify_command(
    token: str = typer.Argument(..., help="Token from a registration link"),
) -> None:
    """Check what a registration token currently grants."""

    async def _verify():
        async with open_app() as taskhero:
            verification = await taskhero.invites.verify_token(token)

        if verification.ok:
            console.print(f"[green]✓[/green] {verification.message}")
            console.print(f"  Email: {verification.email}")
            console.print(f"  Role: {verification.role.value}")
            return

        console.print(f"[red]✗[/red] {verification.message}")
        raise typer.Exit(1)

    run_async(_verify())
