"""Task model."""

import enum

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, generate_id
from .tag import Tag
from .task_tag import task_tags


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    # Store "in_progress", not "IN_PROGRESS"
    return [member.value for member in enum_cls]


class Task(Base, TimestampMixin):
    """To-do item owned by a single user."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Owner, never changes after creation
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, native_enum=False, values_callable=_enum_values),
        default=TaskStatus.TODO,
        nullable=False,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SQLEnum(TaskPriority, native_enum=False, values_callable=_enum_values),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )

    # Tags (many-to-many), read-only: the join rows are written by TaskTagRepository.
    # Ordered by association insertion order.
    tags: Mapped[list[Tag]] = relationship(
        Tag,
        secondary=task_tags,
        order_by=task_tags.c.position,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"
