"""Repository for the task_tags junction table."""

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import task_tags


class TaskTagRepository:
    """
    Репозиторий связей задача-тег.

    Связи не имеют собственного ID: существование строки (task_id, tag_id)
    означает "у задачи есть этот тег". Строки создаются только вместе с
    задачей или при замене набора тегов, порядок задаётся колонкой position.

    Проверка владельца здесь не выполняется - это делает TaskService
    до вызова методов репозитория.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tag_ids(self, task_id: str) -> list[str]:
        """
        Получить ID тегов задачи в порядке вставки.

        SQL эквивалент:
            SELECT tag_id FROM task_tags WHERE task_id = {task_id} ORDER BY position;
        """
        result = await self.db.execute(
            select(task_tags.c.tag_id)
            .where(task_tags.c.task_id == task_id)
            .order_by(task_tags.c.position)
        )
        return list(result.scalars().all())

    async def add(self, task_id: str, tag_ids: list[str]) -> None:
        """
        Создать связи задачи с тегами.

        Args:
            task_id: ID задачи
            tag_ids: ID тегов без повторов, position = индекс в списке

        SQL эквивалент:
            INSERT INTO task_tags (task_id, tag_id, position) VALUES (...), (...);
        """
        if not tag_ids:
            return

        rows = [
            {"task_id": task_id, "tag_id": tag_id, "position": position}
            for position, tag_id in enumerate(tag_ids)
        ]
        await self.db.execute(insert(task_tags), rows)

    async def delete_for_task(self, task_id: str) -> int:
        """
        Удалить все связи задачи.

        Returns:
            Количество удалённых строк

        SQL эквивалент:
            DELETE FROM task_tags WHERE task_id = {task_id};
        """
        result = await self.db.execute(delete(task_tags).where(task_tags.c.task_id == task_id))
        return result.rowcount

    async def replace(self, task_id: str, tag_ids: list[str]) -> None:
        """
        Полностью заменить набор тегов задачи (не diff).

        Удаляет все старые связи и вставляет новые в той же транзакции,
        поэтому результат всегда равен переданному списку, а не объединению.
        """
        await self.delete_for_task(task_id)
        await self.add(task_id, tag_ids)
