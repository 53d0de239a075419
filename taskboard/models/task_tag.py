"""Task-Tag junction table."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table

from .base import Base, utc_now

# Many-to-many junction table for tasks and tags.
# Composite primary key: a (task_id, tag_id) pair exists at most once.
# position - индекс тега в списке, из которого была создана связь (порядок вставки)
task_tags = Table(
    "task_tags",
    Base.metadata,
    Column("task_id", String(36), ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False, default=0),
    Column("created_at", DateTime, default=utc_now, nullable=False),
)
