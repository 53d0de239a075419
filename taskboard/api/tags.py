"""
API endpoints для работы с тегами.

Теги принадлежат текущему пользователю, имена не уникальны.
"""

from fastapi import APIRouter, Depends, status

from ..models import User
from ..services import TagService
from .dependencies import get_current_user, get_tag_service
from .schemas import (
    ErrorResponse,
    TagCreate,
    TagEnvelope,
    TagListEnvelope,
    TagResponse,
    UnauthorizedResponse,
)

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
    responses={401: {"model": UnauthorizedResponse, "description": "Нет действующей сессии"}},
)


@router.get("", response_model=TagListEnvelope, summary="Получить все теги")
async def get_tags(
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagListEnvelope:
    """
    Получить список тегов текущего пользователя.

    Пример запроса:
    ```
    GET /api/tags
    ```
    """
    tags = await service.list_tags(user.id)
    return TagListEnvelope(tags=[TagResponse.model_validate(t) for t in tags])


@router.get(
    "/{tag_id}",
    response_model=TagEnvelope,
    summary="Получить тег по ID",
    responses={404: {"model": ErrorResponse, "description": "Тег не найден"}},
)
async def get_tag(
    tag_id: str,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagEnvelope:
    tag = await service.get_tag(tag_id, user.id)
    return TagEnvelope(tag=TagResponse.model_validate(tag))


@router.post(
    "",
    response_model=TagEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Создать тег",
    responses={400: {"model": ErrorResponse, "description": "Пустое название"}},
)
async def create_tag(
    data: TagCreate,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagEnvelope:
    """
    Создать новый тег.

    Пример запроса:
    ```json
    {"name": "groceries"}
    ```
    """
    tag = await service.create_tag(user.id, data.name)
    return TagEnvelope(tag=TagResponse.model_validate(tag))
