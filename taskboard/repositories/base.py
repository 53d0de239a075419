"""Base repository with owner-scoped CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

# TypeVar для Generic класса - модель обязана иметь колонки id и user_id
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Базовый репозиторий с CRUD операциями, привязанными к владельцу.

    Каждый запрос фильтруется по user_id: чужая запись для репозитория
    не существует (get возвращает None, delete возвращает False).

    Пример использования:
        tag_repo = BaseRepository[Tag](Tag, db_session)
        tag = await tag_repo.get_by_id(tag_id, user_id)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """
        Инициализация репозитория.

        Args:
            model: Класс модели SQLAlchemy с полем user_id (Task, Tag)
            db: Асинхронная сессия базы данных
        """
        self.model = model
        self.db = db

    def _owned(self, user_id: str) -> Select:
        """SELECT * FROM table WHERE user_id = {user_id}"""
        return select(self.model).where(self.model.user_id == user_id)

    async def create(self, obj: ModelType) -> ModelType:
        """
        Создать новую запись в БД.

        Args:
            obj: Экземпляр модели для сохранения (user_id уже заполнен)

        Returns:
            Созданный объект с заполненным ID и timestamps
        """
        self.db.add(obj)
        await self.db.flush()  # flush() отправляет в БД, но не commit
        await self.db.refresh(obj)
        return obj

    async def get_by_id(self, id: str, user_id: str) -> ModelType | None:
        """
        Получить объект владельца по ID.

        SQL эквивалент:
            SELECT * FROM table WHERE id = {id} AND user_id = {user_id} LIMIT 1;
        """
        result = await self.db.execute(self._owned(user_id).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(
        self, user_id: str, skip: int = 0, limit: int | None = 100
    ) -> list[ModelType]:
        """
        Получить все записи владельца с пагинацией (в порядке создания).

        limit=None - без ограничения.

        SQL эквивалент:
            SELECT * FROM table WHERE user_id = {user_id}
            ORDER BY created_at, id OFFSET {skip} LIMIT {limit};
        """
        result = await self.db.execute(
            self._owned(user_id)
            .order_by(self.model.created_at, self.model.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, id: str, user_id: str, **kwargs: Any) -> ModelType | None:
        """
        Обновить запись владельца по ID.

        Args:
            id: Первичный ключ записи
            user_id: Владелец
            **kwargs: Поля для обновления (title="...", status=TaskStatus.COMPLETED)

        Returns:
            Обновлённый объект или None, если не найден у этого владельца
        """
        obj = await self.get_by_id(id, user_id)
        if not obj:
            return None

        for key, value in kwargs.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: str, user_id: str) -> bool:
        """
        Удалить запись владельца по ID.

        Returns:
            True если удалено, False если не найдено

        SQL эквивалент:
            DELETE FROM table WHERE id = {id} AND user_id = {user_id};
        """
        result = await self.db.execute(
            delete(self.model).where(self.model.id == id, self.model.user_id == user_id)
        )
        return result.rowcount > 0

    async def exists(self, id: str, user_id: str) -> bool:
        """Проверить, что запись существует и принадлежит владельцу."""
        return await self.get_by_id(id, user_id) is not None

    async def count(self, user_id: str) -> int:
        """
        Подсчитать записи владельца.

        SQL эквивалент:
            SELECT COUNT(*) FROM table WHERE user_id = {user_id};
        """
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.user_id == user_id)
        )
        return result.scalar_one()
