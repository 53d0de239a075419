"""
Pydantic схемы для API.

DTOs (Data Transfer Objects) - объекты для передачи данных через HTTP.

Входящие поля - одно слово (title, tags, name), поэтому запросы
принимаются как есть. Ответы сериализуются в camelCase (userId, createdAt),
как ожидает фронтенд.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import TaskPriority, TaskStatus


class ResponseModel(BaseModel):
    """Базовая схема ответа: читается из ORM объекта, отдаётся в camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# USER SCHEMAS
# ============================================================================


class UserResponse(ResponseModel):
    """
    Текущий пользователь (GET /api/me).

    Пример:
    {
        "user": {"id": "0b6f...", "name": "Ann", "email": "ann@example.com", ...}
    }
    """

    id: str
    name: str
    email: str
    created_at: datetime


class UserEnvelope(BaseModel):
    user: UserResponse


# ============================================================================
# TAG SCHEMAS
# ============================================================================


class TagCreate(BaseModel):
    """
    Схема для создания тега (POST /api/tags).

    Пример:
    {
        "name": "groceries"
    }
    """

    name: str = Field(..., min_length=1, description="Название тега")


class TagRef(ResponseModel):
    """
    Тег внутри задачи: только id и name.

    Используется внутри TaskResponse.
    """

    id: str
    name: str


class TagResponse(ResponseModel):
    """Тег целиком (GET /api/tags, POST /api/tags)."""

    id: str
    name: str
    user_id: str
    created_at: datetime


class TagEnvelope(BaseModel):
    tag: TagResponse


class TagListEnvelope(BaseModel):
    tags: list[TagResponse]


# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskCreate(BaseModel):
    """
    Схема для создания задачи (POST /api/tasks).

    Пример запроса:
    {
        "title": "Buy milk",
        "priority": "high",
        "tags": ["<tag id>", "<tag id>"]
    }
    """

    title: str = Field(..., min_length=1, description="Название задачи")
    description: str | None = Field(None, description="Описание задачи")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Статус задачи")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Приоритет")
    tags: list[str] | None = Field(default=None, description="ID тегов пользователя")


class TaskUpdate(BaseModel):
    """
    Схема для обновления задачи (PATCH /api/tasks/{id}).

    Все поля опциональные. tags, если передан, заменяет набор тегов целиком;
    пустой список снимает все теги.
    """

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    tags: list[str] | None = None


class TaskResponse(ResponseModel):
    """
    Схема задачи в ответе.

    Пример ответа:
    {
        "id": "6a1c...",
        "title": "Buy milk",
        "description": null,
        "status": "todo",
        "priority": "medium",
        "userId": "0b6f...",
        "createdAt": "2026-10-19T12:00:00",
        "updatedAt": "2026-10-19T12:00:00",
        "tags": [{"id": "t1", "name": "home"}]
    }
    """

    id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    user_id: str
    created_at: datetime
    updated_at: datetime

    # Теги в порядке добавления
    tags: list[TagRef] = []


class TaskEnvelope(BaseModel):
    task: TaskResponse


class TaskListEnvelope(BaseModel):
    tasks: list[TaskResponse]


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Детали ошибки для конкретного поля.

    Пример:
    {
        "field": "title",
        "message": "String should have at least 1 character"
    }
    """

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """
    Тело ошибки с кодом и деталями.

    Коды:
    - VALIDATION_ERROR: ошибка валидации полей или бизнес-правил
    - NOT_FOUND: ресурс не найден у текущего пользователя
    - RATE_LIMIT_EXCEEDED: слишком много запросов
    """

    code: str = Field(..., description="Код ошибки (VALIDATION_ERROR, NOT_FOUND, etc.)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Список ошибок по полям (для валидации)"
    )


class ErrorResponse(BaseModel):
    """
    Единый формат ответа для всех ошибок API.

    Пример:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Task with id=... not found",
            "details": null
        }
    }
    """

    error: ErrorBody


class UnauthorizedResponse(BaseModel):
    """
    Ответ 401, отдельный от ErrorResponse.

    Пример:
    {
        "error": "Unauthorized"
    }
    """

    error: str


class MessageResponse(BaseModel):
    """
    Схема для успешных операций без возврата данных.

    Пример:
    {
        "message": "Task deleted successfully"
    }
    """

    message: str
