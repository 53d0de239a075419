"""
Скрипт для инициализации базы данных.

Создаёт все таблицы напрямую через SQLAlchemy (без Alembic миграций).
Удобно для локальной SQLite базы:
    DATABASE_URL=sqlite+aiosqlite:///./taskboard.db python init_db.py
"""

import asyncio

from taskboard.core.database import init_db


async def main():
    print("Creating tables...")
    await init_db()
    print("Tables created.")


if __name__ == "__main__":
    asyncio.run(main())
