"""Task repository with specific queries."""

from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Task, TaskPriority, TaskStatus, task_tags
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """
    Репозиторий для работы с задачами.

    Включает методы для:
    - Загрузки задачи вместе с тегами (eager loading)
    - Фильтрации по тегу, статусу и приоритету
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    async def get_by_id_full(self, id: str, user_id: str) -> Task | None:
        """
        Получить задачу владельца вместе с тегами.

        populate_existing=True перечитывает теги, даже если задача уже есть
        в сессии: после замены связей старый список был бы неактуален.

        Использование:
            task = await repo.get_by_id_full(task_id, user_id)
            print(task.tags)  # без дополнительного запроса
        """
        result = await self.db.execute(
            self._owned(user_id)
            .options(selectinload(Task.tags))
            .where(Task.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        user_id: str,
        tag_id: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Task]:
        """
        Получить задачи владельца с фильтрами и пагинацией.

        Все фильтры комбинируются через AND. Теги всех задач страницы
        загружаются одним дополнительным запросом (selectinload), и у каждой
        задачи это ПОЛНЫЙ набор тегов, а не только отфильтрованный.

        Args:
            user_id: Владелец
            tag_id: Только задачи с этим тегом (optional)
            status: Фильтр по статусу (optional)
            priority: Фильтр по приоритету (optional)
            skip: Пропустить N записей
            limit: Максимум записей (None - все задачи)

        SQL эквивалент (с tag_id):
            SELECT tasks.* FROM tasks
            JOIN task_tags ON tasks.id = task_tags.task_id
            WHERE tasks.user_id = {user_id}
              AND task_tags.tag_id = {tag_id}
            ORDER BY tasks.created_at, tasks.id
            OFFSET {skip} [LIMIT {limit}];
        """
        query = self._owned(user_id).options(selectinload(Task.tags))

        conditions = []

        if tag_id is not None:
            # (task_id, tag_id) уникальна, поэтому JOIN не даёт дублей
            query = query.join(task_tags, Task.id == task_tags.c.task_id)
            conditions.append(task_tags.c.tag_id == tag_id)

        if status is not None:
            conditions.append(Task.status == status)

        if priority is not None:
            conditions.append(Task.priority == priority)

        if conditions:
            query = query.where(and_(*conditions))

        query = (
            query.order_by(Task.created_at, Task.id)
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())
