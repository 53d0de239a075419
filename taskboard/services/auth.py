"""Session lookup against the external auth provider's tables."""

import secrets
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import UnauthorizedError
from ..core.logging import get_logger
from ..models import User, UserSession, utc_now
from ..repositories import SessionRepository

logger = get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


class AuthService:
    """
    Граница с провайдером авторизации.

    По токену сессии возвращает пользователя или None. Сам протокол
    входа (пароли, OAuth) сюда не входит: сессии создаёт провайдер,
    issue_session нужен только для скриптов и тестов.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.session_repo = SessionRepository(db)

    async def get_session_user(self, token: str | None) -> User | None:
        """
        Найти пользователя по токену сессии.

        Returns:
            Пользователь или None (нет токена, неизвестный токен, сессия истекла)
        """
        if not token:
            return None

        session = await self.session_repo.get_by_token(token)
        if session is None:
            return None

        if session.is_expired:
            logger.info("Expired session rejected", extra={"session_id": session.id})
            return None

        return session.user

    async def require_user(self, token: str | None) -> User:
        """
        То же, что get_session_user, но без пользователя - ошибка.

        Raises:
            UnauthorizedError: Сессия отсутствует или недействительна
        """
        user = await self.get_session_user(token)
        if user is None:
            raise UnauthorizedError()
        return user

    async def issue_session(
        self, user: User, ttl: timedelta = DEFAULT_SESSION_TTL
    ) -> UserSession:
        """Создать сессию для пользователя (seed-скрипт, тесты)."""
        session = UserSession(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=utc_now() + ttl,
        )
        session = await self.session_repo.create(session)
        await self.db.flush()
        return session
