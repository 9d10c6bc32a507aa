"""
TaskHero task models.
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class Task(BaseModel):
    """
    Task model - represents a row in the tasks table.

    Each task belongs to the account in user_id. Standard users only see
    their own tasks; administrators see all of them.
    """

    id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: Optional[str] = None
    user_id: UUID
    created_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "523e4567-e89b-12d3-a456-426614174000",
                "title": "Write release notes",
                "description": "Cover the invitation changes",
                "status": "in_progress",
                "due_date": "2024-01-08T00:00:00Z",
                "priority": 2,
                "category": "docs",
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }

    def matches(self, search: str) -> bool:
        """Case-insensitive substring match on title and description."""
        needle = search.lower()
        return needle in self.title.lower() or needle in (self.description or "").lower()


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""

    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    """Request model for updating a task; unset fields are left alone."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    category: Optional[str] = None

    model_config = {"extra": "forbid"}
