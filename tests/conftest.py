"""
Pytest fixtures для тестов.

Предоставляет:
- test_db: изолированная SQLite in-memory БД для каждого теста
- user / other_user: два владельца для проверки изоляции данных
- test_client: HTTP клиент для тестирования API endpoints
- auth_headers / other_auth_headers: заголовки с токенами сессий двух пользователей
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.api.dependencies import get_db
from taskboard.main import app
from taskboard.models import Base, User
from taskboard.repositories import UserRepository
from taskboard.services import AuthService

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Создаёт async engine для тестовой БД (SQLite in-memory).

    StaticPool обеспечивает что используется одно и то же соединение,
    что критично для in-memory БД (иначе данные теряются).
    Таблицы пересоздаются для каждого теста.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Async session для тестов репозиториев и сервисов."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


async def _create_user(session: AsyncSession, name: str, email: str) -> User:
    user = await UserRepository(session).create(User(name=name, email=email))
    await session.commit()
    return user


@pytest_asyncio.fixture
async def user(test_db) -> User:
    """Основной пользователь для тестов сервисов."""
    return await _create_user(test_db, "Alice", "alice@example.com")


@pytest_asyncio.fixture
async def other_user(test_db) -> User:
    """Второй пользователь: его данные не должны быть видны первому."""
    return await _create_user(test_db, "Bob", "bob@example.com")


@pytest_asyncio.fixture
async def test_client(test_engine):
    """
    HTTP клиент для тестирования API endpoints.

    Использует тестовую БД вместо production БД.
    """
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _issue_token(engine, name: str, email: str) -> str:
    """Создать пользователя и сессию в отдельной транзакции, вернуть токен."""
    TestSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        user = await _create_user(session, name, email)
        user_session = await AuthService(session).issue_session(user)
        await session.commit()
        return user_session.token


@pytest_asyncio.fixture
async def auth_headers(test_engine) -> dict[str, str]:
    """Заголовки авторизации пользователя Alice."""
    token = await _issue_token(test_engine, "Alice", "alice@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def other_auth_headers(test_engine) -> dict[str, str]:
    """Заголовки авторизации пользователя Bob."""
    token = await _issue_token(test_engine, "Bob", "bob@example.com")
    return {"Authorization": f"Bearer {token}"}

