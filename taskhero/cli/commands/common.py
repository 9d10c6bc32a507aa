"""
Shared plumbing for CLI commands: credentials, client lifetime, errors.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Tuple

import httpx
import typer
from postgrest.exceptions import APIError
from pydantic import ValidationError
from rich.console import Console
from supabase_auth.errors import AuthError

from ...auth.models import UserSession
from ...client import TaskHero
from ...errors import TaskHeroError

console = Console()

EmailOption = typer.Option(
    ...,
    "--email",
    "-e",
    envvar="TASKHERO_EMAIL",
    help="Email to sign in with",
)

PasswordOption = typer.Option(
    ...,
    "--password",
    "-p",
    envvar="TASKHERO_PASSWORD",
    prompt=True,
    hide_input=True,
    help="Password to sign in with",
)


def run_async(coro):
    """Run async function in sync context, turning known failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except ValidationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)
    except (TaskHeroError, AuthError, APIError, httpx.HTTPError) as e:
        message = getattr(e, "message", None) or str(e)
        console.print(f"[red]Error:[/red] {message}")
        raise typer.Exit(1)


@asynccontextmanager
async def open_app() -> AsyncIterator[TaskHero]:
    """A TaskHero client that is closed on exit."""
    app = await TaskHero.create()
    try:
        yield app
    finally:
        await app.close()


@asynccontextmanager
async def signed_in(email: str, password: str) -> AsyncIterator[Tuple[TaskHero, UserSession]]:
    """A TaskHero client signed in as the given user."""
    async with open_app() as app:
        session = await app.sessions.sign_in_with_password(email, password)
        yield app, session
