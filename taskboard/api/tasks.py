"""
API endpoints для работы с задачами.

Все endpoints работают только с задачами текущего пользователя:
чужая задача неотличима от несуществующей (404).
"""

from fastapi import APIRouter, Depends, Query, status

from ..models import TaskPriority, TaskStatus, User
from ..services import TaskService
from .dependencies import get_current_user, get_task_service
from .schemas import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListEnvelope,
    TaskResponse,
    TaskUpdate,
    UnauthorizedResponse,
)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={401: {"model": UnauthorizedResponse, "description": "Нет действующей сессии"}},
)


# ============================================================================
# GET ALL TASKS (с фильтрацией и пагинацией)
# ============================================================================


@router.get(
    "",
    response_model=TaskListEnvelope,
    summary="Получить задачи",
    description="""
    Получить задачи текущего пользователя с тегами.

    **Фильтры:**
    - tag: только задачи с этим тегом (теги задачи в ответе - полный набор)
    - status: todo, in_progress, completed
    - priority: low, medium, high

    **Пагинация:**
    - skip: пропустить N записей
    - limit: максимум записей (1-500), без него - все задачи

    Все фильтры комбинируются через AND.
    """,
)
async def get_tasks(
    tag: str | None = Query(None, description="ID тега для фильтрации"),
    status: TaskStatus | None = Query(None, description="Фильтр по статусу"),
    priority: TaskPriority | None = Query(None, description="Фильтр по приоритету"),
    skip: int = Query(0, ge=0, description="Пропустить N записей"),
    limit: int | None = Query(None, ge=1, le=500, description="Максимум записей"),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> TaskListEnvelope:
    """
    Примеры запросов:
    ```
    GET /api/tasks                          # все задачи
    GET /api/tasks?tag=<tag id>             # задачи с тегом
    GET /api/tasks?status=todo&priority=high
    ```
    """
    tasks = await service.list_tasks(
        user_id=user.id,
        tag_id=tag,
        status=status,
        priority=priority,
        skip=skip,
        limit=limit,
    )
    return TaskListEnvelope(tasks=[TaskResponse.model_validate(t) for t in tasks])


# ============================================================================
# GET TASK BY ID
# ============================================================================


@router.get(
    "/{task_id}",
    response_model=TaskEnvelope,
    summary="Получить задачу по ID",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    """Получить задачу вместе с тегами."""
    task = await service.get_task(task_id, user.id)
    return TaskEnvelope(task=TaskResponse.model_validate(task))


# ============================================================================
# CREATE TASK
# ============================================================================


@router.post(
    "",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    description="""
    Создать новую задачу, опционально с тегами.

    Бизнес-правила:
    - Название обязательно и не пустое
    - Теги передаются списком ID и должны принадлежать текущему пользователю
    - Повторяющиеся ID тегов игнорируются
    """,
    responses={400: {"model": ErrorResponse, "description": "Ошибка валидации"}},
)
async def create_task(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    """
    Пример запроса:
    ```json
    {
        "title": "Buy milk",
        "description": "2 liters",
        "priority": "high",
        "tags": ["<tag id>"]
    }
    ```
    """
    task = await service.create_task(
        user_id=user.id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        tag_ids=data.tags,
    )
    return TaskEnvelope(task=TaskResponse.model_validate(task))


# ============================================================================
# UPDATE TASK
# ============================================================================


@router.patch(
    "/{task_id}",
    response_model=TaskEnvelope,
    summary="Обновить задачу",
    description="""
    Частичное обновление задачи.

    - tags передан: набор тегов заменяется целиком (пустой список снимает все теги)
    - tags не передан: теги не меняются
    - updatedAt обновляется при каждом успешном запросе
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    """
    Пример запроса:
    ```json
    {
        "status": "in_progress",
        "tags": ["<tag id>"]
    }
    ```
    """
    task = await service.update_task(
        task_id=task_id,
        user_id=user.id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        tag_ids=data.tags,
    )
    return TaskEnvelope(task=TaskResponse.model_validate(task))


# ============================================================================
# DELETE TASK
# ============================================================================


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Удалить задачу",
    description="Удалить задачу и все её связи с тегами.",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    await service.delete_task(task_id, user.id)
    return MessageResponse(message="Task deleted successfully")
