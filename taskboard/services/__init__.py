"""Service layer with business logic."""

from .auth import AuthService
from .tag import TagService
from .task import TaskService

__all__ = [
    "AuthService",
    "TaskService",
    "TagService",
]
