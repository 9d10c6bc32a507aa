"""
TaskHero CLI - Command-line interface for invitation-only task management.

Usage:
    taskhero invites         Manage invitations
    taskhero users           Manage users and roles
    taskhero tasks           Manage tasks
    taskhero register        Create an account from an invitation token
    taskhero reset-password  Email a password-reset link
    taskhero migrate         Inspect database migrations
"""

import typer

from ..config import TaskHeroConfig
from ..logging_setup import setup_logging
from .commands import auth, invites, migrate, tasks, users

app = typer.Typer(
    name="taskhero",
    help="Invitation-only task management on Supabase",
    add_completion=False,
)

app.command(name="register")(auth.register_command)
app.command(name="reset-password")(auth.reset_password_command)

app.add_typer(invites.app, name="invites")
app.add_typer(users.app, name="users")
app.add_typer(tasks.app, name="tasks")
app.add_typer(migrate.app, name="migrate")


@app.callback()
def callback(
    log_level: str = typer.Option(
        TaskHeroConfig.model_fields["log_level"].default,
        "--log-level",
        envvar="TASKHERO_LOG_LEVEL",
        help="DEBUG, INFO, WARNING, ...",
    ),
    debug: bool = typer.Option(False, "--debug", envvar="TASKHERO_DEBUG", help="Enable debug logging"),
) -> None:
    """
    TaskHero - invitation-only task management.

    Connection settings come from TASKHERO_* environment variables or .env.
    """
    setup_logging(log_level, debug=debug)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
