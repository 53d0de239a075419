"""Repository layer for data access."""

from .base import BaseRepository
from .tag import TagRepository
from .task import TaskRepository
from .task_tag import TaskTagRepository
from .user import SessionRepository, UserRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "TagRepository",
    "TaskTagRepository",
    "UserRepository",
    "SessionRepository",
]
