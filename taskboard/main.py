"""
Главный файл FastAPI приложения.

Точка входа в приложение Taskboard.

Запуск:
    uvicorn taskboard.main:app --reload

API документация:
    http://localhost:8000/docs       - Swagger UI
    http://localhost:8000/redoc      - ReDoc

Все ресурсные endpoints доступны по префиксу API_PREFIX (по умолчанию /api):
    /api/tasks, /api/tags, /api/me
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text

from .api import tags_router, tasks_router, users_router
from .api.errors import error_response, register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .api.schemas import ErrorDetail
from .core.config import settings
from .core.database import AsyncSessionLocal
from .core.logging import get_logger, setup_logging

# LOG_LEVEL: DEBUG/INFO/WARNING/ERROR - что логировать
# LOG_FORMAT: json (production) / simple (development)
setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

logger = get_logger(__name__)

# ============================================================================
# APPLICATION METADATA
# ============================================================================

APP_VERSION = "1.0.0"
APP_START_TIME: float = 0.0  # Will be set on startup

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

# key_func определяет по какому ключу группировать запросы (по IP адресу)
limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Ошибка превышения лимита в едином формате ErrorResponse."""
    return error_response(
        429,
        "RATE_LIMIT_EXCEEDED",
        f"Too many requests. Limit: {exc.detail}",
        [ErrorDetail(field="rate_limit", message=str(exc.detail))],
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    global APP_START_TIME

    APP_START_TIME = time.time()

    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "log_level": settings.LOG_LEVEL,
            "api_prefix": settings.API_PREFIX,
        },
    )

    yield

    uptime = int(time.time() - APP_START_TIME)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# CREATE APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Task manager API: задачи и теги пользователя.

    ## Возможности

    * **Задачи** - статус, приоритет, описание
    * **Теги** - пользовательские метки, связь многие-ко-многим с задачами
    * **Фильтрация** - список задач по тегу, статусу и приоритету

    ## Авторизация

    Токен сессии провайдера авторизации:
    `Authorization: Bearer <token>` или cookie `session_token`.

    ## 3-Layer Architecture

    ```
    API Layer (FastAPI) → Service Layer (Business Logic) → Repository Layer (Database)
    ```
    """,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.state.limiter = limiter
# slowapi handler имеет специфичный тип, но работает корректно
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]


# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Каждый запрос будет залогирован с методом, путём, статусом и временем
app.add_middleware(RequestLoggingMiddleware)


# ============================================================================
# ROUTERS
# ============================================================================

api_router = APIRouter(prefix=settings.API_PREFIX)


@api_router.get("/", tags=["root"], summary="Root endpoint", description="Информация о API")
@limiter.limit(settings.RATE_LIMIT)
async def root(request: Request):
    """Публичный endpoint: информация о API и полезные ссылки."""
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
        "endpoints": {
            "tasks": f"{settings.API_PREFIX}/tasks",
            "tags": f"{settings.API_PREFIX}/tags",
            "me": f"{settings.API_PREFIX}/me",
        },
        "rate_limit": settings.RATE_LIMIT,
    }


# Авторизация подключается в каждом endpoint через Depends(get_current_user),
# так endpoint получает пользователя-владельца, а не только факт проверки.
api_router.include_router(tasks_router)
api_router.include_router(tags_router)
api_router.include_router(users_router)

app.include_router(api_router)

register_error_handlers(app)


# ============================================================================
# HEALTH CHECK
# ============================================================================


@app.get(
    "/health", tags=["health"], summary="Health check", description="Проверка работоспособности API"
)
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request):
    """
    Health check endpoint.

    Проверяет подключение к базе данных.

    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-10-19T12:00:00+00:00"
    }
    ```

    При недоступной БД - 503 и "status": "error".
    """
    uptime_seconds = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0

    db_status = "disconnected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception:
        logger.warning("Health check: database unavailable", exc_info=True)

    checks = {
        "database": db_status,
        "version": APP_VERSION,
        "uptime_seconds": uptime_seconds,
    }

    overall_status = "ok" if db_status == "connected" else "error"
    status_code = 200 if overall_status == "ok" else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": overall_status,
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
