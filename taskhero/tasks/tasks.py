"""
Task management for TaskHero.

Standard users work on their own tasks only; every query they issue is
scoped with user_id. Administrators see and change all tasks. Row-level
security enforces the same rule on the server.
"""

import logging
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from postgrest.exceptions import APIError
from pydantic import ValidationError

from ..auth.models import UserSession
from ..decorators import require_session
from ..errors import InvalidInputError, NotFoundError
from ..utils.supabase import raise_for_api_error
from .models import CreateTaskRequest, Task, TaskStatus, UpdateTaskRequest

if TYPE_CHECKING:
    from ..client import TaskHero

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"


class TaskManager:
    """
    Manages task operations.

    Example:
        ```python
        task = await app.tasks.create(session, title="Ship invitations")
        await app.tasks.set_status(session, task.id, TaskStatus.COMPLETED)
        ```
    """

    def __init__(self, app: "TaskHero") -> None:
        self.app = app
        self.client = app.client

    def _scoped(self, query, session: UserSession):
        """Restrict a query to the session's own rows unless it is an admin."""
        if session.is_admin:
            return query
        return query.eq("user_id", str(session.user_id))

    @require_session
    async def list(
        self,
        session: UserSession,
        status: Optional[TaskStatus] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """
        List visible tasks, newest first.

        Args:
            session: Acting user
            status: Only return tasks in this status
            search: Case-insensitive text to look for in title or description

        Returns:
            List of Task instances
        """
        query = self._scoped(self.client.table(TASKS_TABLE).select("*"), session)

        if status is not None:
            query = query.eq("status", TaskStatus(status).value)

        result = await query.order("created_at", desc=True).execute()
        tasks = [Task(**row) for row in result.data]

        if search:
            tasks = [task for task in tasks if task.matches(search)]

        return tasks

    @require_session
    async def get(self, session: UserSession, task_id: UUID) -> Optional[Task]:
        """Get a visible task by ID, or None."""
        query = self.client.table(TASKS_TABLE).select("*").eq("id", str(task_id))
        result = await self._scoped(query, session).execute()

        if not result.data:
            return None

        return Task(**result.data[0])

    @require_session
    async def create(self, session: UserSession, title: str, **fields) -> Task:
        """
        Create a task owned by the session's user.

        Args:
            session: Acting user, becomes the owner
            title: Task title (required, non-empty)
            **fields: description, status, due_date, priority, category

        Raises:
            InvalidInputError: If a field is invalid
        """
        try:
            request = CreateTaskRequest(title=title, **fields)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid task: {exc}") from exc

        task_data = request.model_dump(mode="json")
        task_data["category"] = request.category or None
        task_data["user_id"] = str(session.user_id)

        try:
            result = await self.client.table(TASKS_TABLE).insert(task_data).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Not allowed to create tasks")

        task = Task(**result.data[0])
        logger.info("Task %s created by %s", task.id, session.user_id)
        return task

    @require_session
    async def update(self, session: UserSession, task_id: UUID, **changes) -> Task:
        """
        Update fields of a task.

        Raises:
            InvalidInputError: If a change is invalid or there is nothing to change
            NotFoundError: If no visible task has this ID
        """
        try:
            request = UpdateTaskRequest(**changes)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid task update: {exc}") from exc

        update_data = request.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            raise InvalidInputError("No changes given")
        if "category" in update_data:
            update_data["category"] = update_data["category"] or None

        query = self.client.table(TASKS_TABLE).update(update_data).eq("id", str(task_id))

        try:
            result = await self._scoped(query, session).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Not allowed to change this task")

        if not result.data:
            raise NotFoundError(f"Task {task_id} not found")

        return Task(**result.data[0])

    async def set_status(
        self,
        session: UserSession,
        task_id: UUID,
        status: TaskStatus,
    ) -> Task:
        """Move a task to another status."""
        return await self.update(session, task_id, status=status)

    @require_session
    async def delete(self, session: UserSession, task_id: UUID) -> None:
        """
        Delete a task.

        Raises:
            NotFoundError: If no visible task has this ID
        """
        query = self.client.table(TASKS_TABLE).delete().eq("id", str(task_id))

        try:
            result = await self._scoped(query, session).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Not allowed to delete this task")

        if not result.data:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info("Task %s deleted by %s", task_id, session.user_id)
