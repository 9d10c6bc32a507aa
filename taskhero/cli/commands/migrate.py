"""
taskhero migrate commands - schema migration status and SQL.

PostgREST cannot run DDL, so the SQL is printed for the Supabase SQL
editor or psql rather than applied.
"""

from typing import Optional

import typer
from rich.table import Table

from ...config import load_config
from ...migrations.manager import MigrationManager
from ...utils.supabase import TaskHeroSupabaseClient
from .common import console, run_async

app = typer.Typer(help="Inspect database migrations")


async def _manager(offline: bool) -> MigrationManager:
    if offline:
        return MigrationManager()
    client = await TaskHeroSupabaseClient.create(load_config())
    return MigrationManager(client)


@app.command("status")
def migrate_status_command(
    offline: bool = typer.Option(False, "--offline", help="Don't ask the database what is applied"),
) -> None:
    """
    Show which migrations are applied.

    Example:
        $ taskhero migrate status
    """

    async def _status():
        manager = await _manager(offline)
        rows = await manager.status()

        table = Table(title="Migrations")
        table.add_column("Version", style="cyan")
        table.add_column("Name")
        table.add_column("Applied")

        for migration, applied in rows:
            table.add_row(
                migration.version,
                migration.name,
                "[green]✓[/green]" if applied else "[yellow]pending[/yellow]",
            )

        console.print(table)

    run_async(_status())


@app.command("sql")
def migrate_sql_command(
    target: Optional[str] = typer.Argument(None, help="Last version to include (default: latest)"),
    offline: bool = typer.Option(False, "--offline", help="Print every migration, applied or not"),
) -> None:
    """
    Print the SQL of pending migrations.

    Example:
        $ taskhero migrate sql | psql "$DATABASE_URL"
    """

    async def _sql():
        manager = await _manager(offline)
        sql = await manager.pending_sql(target)
        if not sql:
            console.print("[green]✓[/green] No pending migrations")
            return
        typer.echo(sql)

    run_async(_sql())
