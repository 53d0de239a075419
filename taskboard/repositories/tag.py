"""Tag repository with specific queries."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Tag
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """
    Репозиторий для работы с тегами.

    Теги принадлежат пользователю, имена не уникальны.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_ids(self, ids: list[str], user_id: str) -> list[Tag]:
        """
        Получить теги владельца по списку ID.

        Args:
            ids: Список ID тегов
            user_id: Владелец

        Returns:
            Найденные теги (чужие и несуществующие ID просто отсутствуют)

        SQL эквивалент:
            SELECT * FROM tags WHERE user_id = {user_id} AND id IN ({ids});

        Используется для проверки, что все теги задачи принадлежат
        тому же пользователю, прежде чем создавать связи.
        """
        if not ids:
            return []

        result = await self.db.execute(self._owned(user_id).where(Tag.id.in_(ids)))
        return list(result.scalars().all())

