"""Repositories for the auth provider's users and sessions (read side)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import User, UserSession


class UserRepository:
    """Репозиторий пользователей. Пользователей создаёт провайдер авторизации."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def get_by_id(self, id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.id == id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class SessionRepository:
    """Репозиторий сессий."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, session: UserSession) -> UserSession:
        self.db.add(session)
        await self.db.flush()
        await self.db.refresh(session)
        return session

    async def get_by_token(self, token: str) -> UserSession | None:
        """
        Найти сессию по токену вместе с пользователем.

        SQL эквивалент:
            SELECT sessions.*, users.* FROM sessions
            JOIN users ON users.id = sessions.user_id
            WHERE sessions.token = {token};
        """
        result = await self.db.execute(
            select(UserSession)
            .options(selectinload(UserSession.user))
            .where(UserSession.token == token)
        )
        return result.scalar_one_or_none()
