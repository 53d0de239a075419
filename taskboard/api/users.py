"""API endpoint для текущего пользователя."""

from fastapi import APIRouter, Depends

from ..models import User
from .dependencies import get_current_user
from .schemas import UnauthorizedResponse, UserEnvelope, UserResponse

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    response_model=UserEnvelope,
    summary="Текущий пользователь",
    responses={401: {"model": UnauthorizedResponse, "description": "Нет действующей сессии"}},
)
async def get_me(user: User = Depends(get_current_user)) -> UserEnvelope:
    """Пользователь, которому принадлежит сессия из запроса."""
    return UserEnvelope(user=UserResponse.model_validate(user))
