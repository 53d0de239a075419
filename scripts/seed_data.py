#!/usr/bin/env python3
"""
Seed script: demo user, session token and tagged tasks.

Работает напрямую через сервисный слой, поэтому таблицы должны существовать
(python init_db.py или alembic upgrade head).

Запуск:
    python -m scripts.seed_data

В конце печатает токен сессии для заголовка Authorization: Bearer <token>.
"""

import asyncio

from taskboard.core.database import AsyncSessionLocal
from taskboard.models import TaskPriority, TaskStatus, User
from taskboard.repositories import UserRepository
from taskboard.services import AuthService, TagService, TaskService

DEMO_USER = {"name": "Demo User", "email": "demo@example.com"}

TAGS = ["home", "work", "errands", "health", "reading"]

# (title, description, status, priority, tag names)
TASKS = [
    ("Buy milk", "2 liters, lactose free", TaskStatus.TODO, TaskPriority.MEDIUM, ["home", "errands"]),
    ("Renew passport", None, TaskStatus.IN_PROGRESS, TaskPriority.HIGH, ["errands"]),
    ("Write quarterly report", "Sections 1-3", TaskStatus.TODO, TaskPriority.HIGH, ["work"]),
    ("Review pull requests", None, TaskStatus.COMPLETED, TaskPriority.MEDIUM, ["work"]),
    ("Book dentist appointment", None, TaskStatus.TODO, TaskPriority.LOW, ["health"]),
    ("Finish 'Designing Data-Intensive Applications'", None, TaskStatus.IN_PROGRESS,
     TaskPriority.LOW, ["reading"]),
    ("Fix leaking kitchen tap", None, TaskStatus.TODO, TaskPriority.HIGH, ["home"]),
]


async def seed() -> str:
    async with AsyncSessionLocal() as db:
        user_repo = UserRepository(db)
        user = await user_repo.get_by_email(DEMO_USER["email"])
        if user is None:
            user = await user_repo.create(User(**DEMO_USER))

        session = await AuthService(db).issue_session(user)

        tag_service = TagService(db)
        tag_ids = {}
        for name in TAGS:
            tag = await tag_service.create_tag(user.id, name)
            tag_ids[name] = tag.id

        task_service = TaskService(db)
        for title, description, status, priority, tag_names in TASKS:
            await task_service.create_task(
                user_id=user.id,
                title=title,
                description=description,
                status=status,
                priority=priority,
                tag_ids=[tag_ids[name] for name in tag_names],
            )

        await db.commit()
        print(f"Created {len(TAGS)} tags and {len(TASKS)} tasks for {user.email}")
        return session.token


def main():
    token = asyncio.run(seed())
    print(f"Session token: {token}")
    print(f'curl -H "Authorization: Bearer {token}" http://localhost:8000/api/tasks')


if __name__ == "__main__":
    main()
