"""
taskhero tasks command - Task management CLI.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

import typer
from rich.table import Table

from ...tasks.models import TaskPriority, TaskStatus
from .common import EmailOption, PasswordOption, console, run_async, signed_in

app = typer.Typer(help="Manage tasks")

STATUS_STYLES = {
    TaskStatus.PENDING: "yellow",
    TaskStatus.IN_PROGRESS: "cyan",
    TaskStatus.COMPLETED: "green",
}


@app.command("list")
def tasks_list_command(
    status: Optional[TaskStatus] = typer.Option(None, "--status", "-s", help="Only this status"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Text in title or description"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """List your tasks (all tasks for administrators)."""

    async def _list():
        async with signed_in(email, password) as (taskhero, session):
            tasks = await taskhero.tasks.list(session, status=status, search=search)

        if not tasks:
            console.print("[yellow]No tasks found[/yellow]")
            return

        table = Table(title="Tasks")
        table.add_column("Title", style="bold")
        table.add_column("Status")
        table.add_column("Priority")
        table.add_column("Due", style="yellow")
        table.add_column("Category")
        table.add_column("ID", style="dim")

        for task in tasks:
            style = STATUS_STYLES[task.status]
            table.add_row(
                task.title,
                f"[{style}]{task.status.value}[/{style}]",
                task.priority.name.lower(),
                task.due_date.strftime("%Y-%m-%d") if task.due_date else "",
                task.category or "",
                str(task.id),
            )

        console.print(table)

    run_async(_list())


@app.command("add")
def tasks_add_command(
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    priority: int = typer.Option(int(TaskPriority.MEDIUM), "--priority", min=1, max=3, help="1 low, 2 medium, 3 high"),
    due: Optional[datetime] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Create a task."""

    async def _add():
        async with signed_in(email, password) as (taskhero, session):
            task = await taskhero.tasks.create(
                session,
                title=title,
                description=description,
                priority=priority,
                due_date=due,
                category=category,
            )
        console.print(f"[green]✓[/green] Task created: {task.title}")
        console.print(f"  ID: {task.id}")

    run_async(_add())


@app.command("set-status")
def tasks_set_status_command(
    task_id: UUID = typer.Argument(..., help="Task ID"),
    status: TaskStatus = typer.Argument(..., help="New status"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Move a task to another status."""

    async def _set_status():
        async with signed_in(email, password) as (taskhero, session):
            task = await taskhero.tasks.set_status(session, task_id, status)
        console.print(f"[green]✓[/green] {task.title} is now {task.status.value}")

    run_async(_set_status())


@app.command("delete")
def tasks_delete_command(
    task_id: UUID = typer.Argument(..., help="Task ID"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Delete a task."""

    async def _delete():
        async with signed_in(email, password) as (taskhero, session):
            await taskhero.tasks.delete(session, task_id)
        console.print(f"[green]✓[/green] Task {task_id} deleted")

    run_async(_delete())
