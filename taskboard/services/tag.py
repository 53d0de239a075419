"""Tag service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Tag
from ..repositories import TagRepository

logger = get_logger(__name__)


class TagService:
    """
    Сервис для работы с тегами.

    Теги принадлежат пользователю. Имена не уникальны и не нормализуются
    (только обрезаются пробелы по краям), теги не переименовываются.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.tag_repo = TagRepository(db)

    async def create_tag(self, user_id: str, name: str) -> Tag:
        """
        Создать новый тег.

        Args:
            user_id: Владелец
            name: Название тега

        Returns:
            Созданный тег

        Raises:
            ValidationError: Название пустое
        """
        if not name or not name.strip():
            raise ValidationError(
                "Tag name cannot be empty",
                details=[{"field": "name", "message": "Name is required"}],
            )

        tag = Tag(name=name.strip(), user_id=user_id)
        tag = await self.tag_repo.create(tag)
        await self.db.flush()

        logger.info("Tag created", extra={"tag_id": tag.id})

        return tag

    async def get_tag(self, tag_id: str, user_id: str) -> Tag:
        """
        Получить тег владельца по ID.

        Raises:
            NotFoundError: Тега нет или он принадлежит другому пользователю
        """
        tag = await self.tag_repo.get_by_id(tag_id, user_id)
        if not tag:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def list_tags(self, user_id: str) -> list[Tag]:
        """Получить все теги владельца в порядке создания."""
        return await self.tag_repo.get_all(user_id, limit=None)
