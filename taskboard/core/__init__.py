"""Core application components."""

from .config import Settings, settings
from .database import AsyncSessionLocal, drop_db, engine, get_db, init_db
from .exceptions import NotFoundError, TaskboardError, UnauthorizedError, ValidationError

__all__ = [
    "settings",
    "Settings",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "drop_db",
    "TaskboardError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
