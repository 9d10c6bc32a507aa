"""
taskhero register / reset-password commands.
"""

import typer

from .common import console, open_app, run_async


def register_command(
    token: str = typer.Argument(..., help="Token from the registration link"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password for the new account",
    ),
) -> None:
    """
    Create an account from an invitation.

    Example:
        $ taskhero register 3q2-Xb...
    """

    async def _register():
        async with open_app() as taskhero:
            verification = await taskhero.invites.verify_token(token)
            if not verification.ok:
                console.print(f"[red]✗[/red] {verification.message}")
                raise typer.Exit(1)

            console.print(f"Registering [cyan]{verification.email}[/cyan] as {verification.role.value}")
            result = await taskhero.registration.register(token, password)

        console.print(f"[green]✓[/green] Account created for {result.email}")
        if not result.invitation_consumed:
            console.print("[yellow]The invitation could not be marked used; an administrator should delete it[/yellow]")
        if result.session is None:
            console.print("Check your inbox to confirm the address, then sign in.")

    run_async(_register())


def reset_password_command(
    email: str = typer.Argument(..., help="Account email"),
) -> None:
    """Email a password-reset link."""

    async def _reset():
        async with open_app() as taskhero:
            await taskhero.sessions.send_password_reset(email)
        console.print(f"[green]✓[/green] If {email} has an account, a reset link is on its way")

    run_async(_reset())
