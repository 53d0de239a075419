"""SQLAlchemy models for Taskboard."""

from .base import Base, TimestampMixin, generate_id, utc_now
from .tag import Tag
from .task import Task, TaskPriority, TaskStatus
from .task_tag import task_tags
from .user import User, UserSession

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_id",
    "utc_now",
    "User",
    "UserSession",
    "Tag",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "task_tags",
]
