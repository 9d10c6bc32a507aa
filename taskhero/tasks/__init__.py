"""
TaskHero tasks module.
"""

from .models import Task, TaskPriority, TaskStatus
from .tasks import TaskManager

__all__ = ["TaskManager", "Task", "TaskPriority", "TaskStatus"]
