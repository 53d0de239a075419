"""
Dependencies для FastAPI endpoints.

Цепочка зависимостей одного запроса:

    get_db -> get_current_user      (401, если сессии нет)
           -> get_task_service / get_tag_service

FastAPI кэширует get_db в пределах запроса, поэтому проверка сессии
и сервис работают в одной и той же транзакции.
"""

from fastapi import Depends
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.logging import user_id_var
from ..models import User
from ..services import AuthService, TagService, TaskService

# ============================================================================
# SESSION AUTHENTICATION
# ============================================================================

# Токен сессии можно передать двумя способами:
#   Authorization: Bearer <token>   - API клиенты, Swagger UI
#   Cookie: session_token=<token>   - браузерный фронтенд
bearer_scheme = HTTPBearer(
    auto_error=False,  # Не выбрасывать 403 автоматически, ответим 401 сами
    description="Токен сессии провайдера авторизации",
)
session_cookie = APIKeyCookie(
    name=settings.SESSION_COOKIE_NAME,
    auto_error=False,
    description="Cookie с токеном сессии",
)


async def get_session_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cookie_token: str | None = Depends(session_cookie),
) -> str | None:
    """Достать токен сессии из заголовка Authorization или из cookie."""
    if credentials is not None:
        return credentials.credentials
    return cookie_token


async def get_current_user(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency для проверки сессии.

    Как работает:
    1. Клиент отправляет токен сессии (заголовок или cookie)
    2. AuthService ищет сессию и проверяет срок действия
    3. Нет пользователя - UnauthorizedError (401)
    4. Есть - user.id становится владельцем для всех запросов к задачам и тегам

    Использование:
        @router.get("/tasks")
        async def get_tasks(user: User = Depends(get_current_user)):
            ...
    """
    user = await AuthService(db).require_user(token)
    user_id_var.set(user.id)
    return user


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    """
    Dependency для TaskService.

    Использование:
        @router.post("/tasks")
        async def create_task(
            service: TaskService = Depends(get_task_service)
        ):
            ...
    """
    return TaskService(db)


async def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    """Dependency для TagService."""
    return TagService(db)


__all__ = [
    "get_db",
    "get_session_token",
    "get_current_user",
    "get_task_service",
    "get_tag_service",
]
