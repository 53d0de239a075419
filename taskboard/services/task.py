"""Task service with business logic."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Task, TaskPriority, TaskStatus, utc_now
from ..repositories import TagRepository, TaskRepository, TaskTagRepository

logger = get_logger(__name__)


class TaskService:
    """
    Сервис для работы с задачами.

    Все операции выполняются от имени пользователя (user_id) и видят
    только его задачи и теги. Сервис также отвечает за связи задача-тег:
    - при создании задачи связи создаются по списку ID тегов
    - при обновлении со списком тегов набор заменяется целиком
    - при удалении задачи все её связи удаляются

    Сервис делает только flush(), commit/rollback выполняет get_db,
    поэтому все шаги одного запроса - одна транзакция.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.task_repo = TaskRepository(db)
        self.tag_repo = TagRepository(db)
        self.task_tag_repo = TaskTagRepository(db)

    async def create_task(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        tag_ids: list[str] | None = None,
    ) -> Task:
        """
        Создать новую задачу с тегами.

        Args:
            user_id: Владелец задачи
            title: Название задачи
            description: Описание
            status: Статус (по умолчанию TODO)
            priority: Приоритет (по умолчанию MEDIUM)
            tag_ids: ID тегов владельца

        Returns:
            Созданная задача с загруженными тегами

        Raises:
            ValidationError: Пустое название или чужой/несуществующий тег

        Бизнес-правила:
        1. Название обязательно (проверяется до обращения к БД)
        2. Повторяющиеся ID тегов схлопываются в одну связь
        3. Все теги существуют и принадлежат владельцу задачи
        """
        # 1. ВАЛИДАЦИЯ: Название
        self._validate_title(title)

        # 2. ВАЛИДАЦИЯ: Теги
        resolved_tag_ids = await self._resolve_tag_ids(tag_ids or [], user_id)

        # 3. СОЗДАНИЕ: Задача
        task = Task(
            title=title.strip(),
            description=(description or "").strip() or None,
            status=status,
            priority=priority,
            user_id=user_id,
        )
        task = await self.task_repo.create(task)

        # 4. КООРДИНАЦИЯ: Связи с тегами
        await self.task_tag_repo.add(task.id, resolved_tag_ids)
        await self.db.flush()

        logger.info(
            "Task created",
            extra={"task_id": task.id, "tag_count": len(resolved_tag_ids)},
        )

        return await self.task_repo.get_by_id_full(task.id, user_id)

    async def get_task(self, task_id: str, user_id: str) -> Task:
        """
        Получить задачу владельца вместе с тегами.

        Raises:
            NotFoundError: Задачи нет или она принадлежит другому пользователю
        """
        task = await self.task_repo.get_by_id_full(task_id, user_id)
        if not task:
            raise NotFoundError("Task", task_id)
        return task

    async def list_tasks(
        self,
        user_id: str,
        tag_id: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Task]:
        """
        Получить задачи владельца с фильтрами.

        Args:
            user_id: Владелец
            tag_id: Только задачи с этим тегом. Тег другого пользователя
                даёт пустой список, а не ошибку.
            status: Фильтр по статусу
            priority: Фильтр по приоритету
            skip: Пропустить N записей
            limit: Максимум записей (None - без ограничения)

        Примеры:
            # Все задачи с тегом
            tasks = await service.list_tasks(user_id, tag_id=tag.id)

            # Высокоприоритетные задачи в работе
            tasks = await service.list_tasks(
                user_id,
                status=TaskStatus.IN_PROGRESS,
                priority=TaskPriority.HIGH,
            )
        """
        return await self.task_repo.get_filtered(
            user_id=user_id,
            tag_id=tag_id,
            status=status,
            priority=priority,
            skip=skip,
            limit=limit,
        )

    async def update_task(
        self,
        task_id: str,
        user_id: str,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        tag_ids: list[str] | None = None,
    ) -> Task:
        """
        Частично обновить задачу.

        None означает "поле не передано". Пустая строка в description
        очищает описание, пустой список tag_ids снимает все теги.

        Returns:
            Обновлённая задача с тегами

        Raises:
            ValidationError: Пустое название или чужой/несуществующий тег
            NotFoundError: Задача не найдена у владельца

        Бизнес-правила:
        1. tag_ids передан - набор тегов заменяется целиком (не объединяется)
        2. tag_ids не передан - связи не трогаем
        3. updated_at обновляется при любом успешном PATCH, даже если
           значения совпадают с текущими или меняются только теги
        """
        # 1. ВАЛИДАЦИЯ: Название (до обращения к БД)
        if title is not None:
            self._validate_title(title)

        # 2. ПРОВЕРКА: Задача существует и принадлежит пользователю
        await self.get_task(task_id, user_id)

        # 3. ВАЛИДАЦИЯ: Новый набор тегов
        resolved_tag_ids = None
        if tag_ids is not None:
            resolved_tag_ids = await self._resolve_tag_ids(tag_ids, user_id)

        # 4. ОБНОВЛЕНИЕ: Собираем изменения
        updates: dict[str, Any] = {"updated_at": utc_now()}
        if title is not None:
            updates["title"] = title.strip()
        if description is not None:
            updates["description"] = description.strip() or None
        if status is not None:
            updates["status"] = status
        if priority is not None:
            updates["priority"] = priority

        await self.task_repo.update(task_id, user_id, **updates)

        # 5. КООРДИНАЦИЯ: Замена тегов
        if resolved_tag_ids is not None:
            await self.task_tag_repo.replace(task_id, resolved_tag_ids)

        await self.db.flush()

        logger.info(
            "Task updated",
            extra={
                "task_id": task_id,
                "fields": sorted(k for k in updates if k != "updated_at"),
                "tags_replaced": resolved_tag_ids is not None,
            },
        )

        return await self.get_task(task_id, user_id)

    async def delete_task(self, task_id: str, user_id: str) -> bool:
        """
        Удалить задачу вместе со всеми её связями с тегами.

        Returns:
            True если удалена

        Raises:
            NotFoundError: Задача не найдена у владельца

        Связи удаляются явно (не полагаемся на ON DELETE CASCADE, который
        в SQLite работает только с PRAGMA foreign_keys=ON).
        """
        await self.get_task(task_id, user_id)

        removed_links = await self.task_tag_repo.delete_for_task(task_id)
        deleted = await self.task_repo.delete(task_id, user_id)
        await self.db.flush()

        logger.info("Task deleted", extra={"task_id": task_id, "removed_links": removed_links})

        return deleted

    # Вспомогательные методы (private)

    def _validate_title(self, title: str) -> None:
        if not title or not title.strip():
            raise ValidationError(
                "Task title cannot be empty",
                details=[{"field": "title", "message": "Title is required"}],
            )

    async def _resolve_tag_ids(self, tag_ids: list[str], user_id: str) -> list[str]:
        """
        Проверить список ID тегов перед созданием связей.

        Returns:
            ID без повторов, в порядке первого появления

        Raises:
            ValidationError: Хотя бы один тег не существует или чужой

        Пример:
            ["t1", "t2", "t1"] -> ["t1", "t2"]
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        owned = await self.tag_repo.get_by_ids(unique_ids, user_id)
        owned_ids = {tag.id for tag in owned}

        missing = [tag_id for tag_id in unique_ids if tag_id not in owned_ids]
        if missing:
            raise ValidationError(
                f"Unknown tag ids: {', '.join(missing)}",
                details=[
                    {"field": "tags", "message": f"Tag '{tag_id}' not found"} for tag_id in missing
                ],
            )

        return unique_ids
