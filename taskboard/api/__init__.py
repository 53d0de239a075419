"""API layer - FastAPI endpoints."""

from .tags import router as tags_router
from .tasks import router as tasks_router
from .users import router as users_router

__all__ = [
    "tasks_router",
    "tags_router",
    "users_router",
]
