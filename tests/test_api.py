"""
Тесты для API Layer (HTTP endpoints).

Проверяем:
- Авторизацию: 401 без сессии, токен в заголовке или в cookie
- CRUD задач и тегов через HTTP
- Формат ответов (camelCase) и ошибок (ErrorResponse, отдельный 401)
- Изоляцию данных разных пользователей
- Служебные endpoints: /api/, /health, X-Request-ID
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import taskboard.main
from taskboard.core.exceptions import ValidationError
from taskboard.repositories import TaskTagRepository


async def _create_tag(client: AsyncClient, headers: dict, name: str) -> str:
    response = await client.post("/api/tags", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()["tag"]["id"]


# ============================================================================
# AUTHENTICATION
# ============================================================================


@pytest.mark.asyncio
async def test_tasks_require_session(test_client: AsyncClient):
    """Test: без токена - 401 с телом {"error": "Unauthorized"}."""
    response = await test_client.get("/api/tasks")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_invalid_token(test_client: AsyncClient):
    """Test: неизвестный токен - 401."""
    response = await test_client.post(
        "/api/tasks",
        json={"title": "Task"},
        headers={"Authorization": "Bearer not-a-real-token"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_session_cookie(test_client: AsyncClient, auth_headers):
    """Test: токен сессии в cookie."""
    token = auth_headers["Authorization"].removeprefix("Bearer ")

    response = await test_client.get("/api/me", headers={"Cookie": f"session_token={token}"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@example.com"


@pytest.mark.asyncio
async def test_get_me(test_client: AsyncClient, auth_headers):
    """Test: текущий пользователь в camelCase."""
    response = await test_client.get("/api/me", headers=auth_headers)

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Alice"
    assert "createdAt" in user


# ============================================================================
# TAGS
# ============================================================================


@pytest.mark.asyncio
async def test_create_and_list_tags(test_client: AsyncClient, auth_headers):
    """Test: создание тега и список тегов."""
    response = await test_client.post("/api/tags", json={"name": "home"}, headers=auth_headers)

    assert response.status_code == 201
    tag = response.json()["tag"]
    assert tag["name"] == "home"
    assert set(tag) == {"id", "name", "userId", "createdAt"}

    response = await test_client.get("/api/tags", headers=auth_headers)

    assert response.status_code == 200
    assert [t["id"] for t in response.json()["tags"]] == [tag["id"]]

    response = await test_client.get(f"/api/tags/{tag['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["tag"]["name"] == "home"


@pytest.mark.asyncio
async def test_create_tag_empty_name(test_client: AsyncClient, auth_headers):
    """Test: пустое имя тега - 400."""
    response = await test_client.post("/api/tags", json={"name": ""}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


# ============================================================================
# TASKS
# ============================================================================


@pytest.mark.asyncio
async def test_task_lifecycle_with_tags(test_client: AsyncClient, auth_headers):
    """Test: создание с тегами, замена тегов, удаление, фильтр по тегу."""
    t1 = await _create_tag(test_client, auth_headers, "t1")
    t2 = await _create_tag(test_client, auth_headers, "t2")

    # Create
    response = await test_client.post(
        "/api/tasks", json={"title": "Buy milk", "tags": [t1, t2]}, headers=auth_headers
    )
    assert response.status_code == 201
    task = response.json()["task"]
    assert task["title"] == "Buy milk"
    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["tags"] == [{"id": t1, "name": "t1"}, {"id": t2, "name": "t2"}]
    task_id = task["id"]

    # Replace tags
    response = await test_client.patch(
        f"/api/tasks/{task_id}", json={"tags": [t2]}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["task"]["tags"] == [{"id": t2, "name": "t2"}]

    # Filter by tag
    response = await test_client.get(f"/api/tasks?tag={t1}", headers=auth_headers)
    assert response.json()["tasks"] == []

    response = await test_client.get(f"/api/tasks?tag={t2}", headers=auth_headers)
    assert [t["id"] for t in response.json()["tasks"]] == [task_id]

    # Delete
    response = await test_client.delete(f"/api/tasks/{task_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}

    response = await test_client.get(f"/api/tasks/{task_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"

    response = await test_client.get(f"/api/tasks?tag={t2}", headers=auth_headers)
    assert response.json()["tasks"] == []


@pytest.mark.asyncio
async def test_task_response_is_camel_case(test_client: AsyncClient, auth_headers):
    """Test: поля ответа в camelCase."""
    response = await test_client.post(
        "/api/tasks", json={"title": "Task"}, headers=auth_headers
    )

    task = response.json()["task"]
    assert set(task) == {
        "id",
        "title",
        "description",
        "status",
        "priority",
        "userId",
        "createdAt",
        "updatedAt",
        "tags",
    }
    assert task["tags"] == []


@pytest.mark.asyncio
async def test_create_task_empty_title(test_client: AsyncClient, auth_headers):
    """Test: пустое название - 400 с деталями по полю."""
    response = await test_client.post("/api/tasks", json={"title": ""}, headers=auth_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "title"


@pytest.mark.asyncio
async def test_create_task_blank_title(test_client: AsyncClient, auth_headers):
    """Test: название из пробелов отклоняет сервис - тоже 400."""
    response = await test_client.post("/api/tasks", json={"title": "   "}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Task title cannot be empty"


@pytest.mark.asyncio
async def test_long_title_and_tag_name_accepted(test_client: AsyncClient, auth_headers):
    """Test: длина названия не ограничена."""
    long_name = "n" * 500
    tag_id = await _create_tag(test_client, auth_headers, long_name)

    long_title = "t" * 1000
    response = await test_client.post(
        "/api/tasks", json={"title": long_title, "tags": [tag_id]}, headers=auth_headers
    )

    assert response.status_code == 201
    task = response.json()["task"]
    assert task["title"] == long_title
    assert task["tags"] == [{"id": tag_id, "name": long_name}]


@pytest.mark.asyncio
async def test_blank_description_is_null(test_client: AsyncClient, auth_headers):
    """Test: описание из пробелов - null и при создании, и при PATCH."""
    response = await test_client.post(
        "/api/tasks", json={"title": "Task", "description": "  "}, headers=auth_headers
    )
    task = response.json()["task"]
    assert task["description"] is None

    response = await test_client.patch(
        f"/api/tasks/{task['id']}", json={"description": "  "}, headers=auth_headers
    )
    assert response.json()["task"]["description"] is None


@pytest.mark.asyncio
async def test_create_task_invalid_status(test_client: AsyncClient, auth_headers):
    """Test: неизвестный статус - 400."""
    response = await test_client.post(
        "/api/tasks", json={"title": "Task", "status": "done"}, headers=auth_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_task_with_foreign_tag(
    test_client: AsyncClient, auth_headers, other_auth_headers
):
    """Test: чужой тег - 400, задача не создаётся."""
    foreign_tag = await _create_tag(test_client, other_auth_headers, "theirs")

    response = await test_client.post(
        "/api/tasks", json={"title": "Task", "tags": [foreign_tag]}, headers=auth_headers
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "tags"

    response = await test_client.get("/api/tasks", headers=auth_headers)
    assert response.json()["tasks"] == []


@pytest.mark.asyncio
async def test_patch_without_tags_keeps_them(test_client: AsyncClient, auth_headers):
    """Test: PATCH без tags не трогает теги, пустой список снимает их."""
    tag = await _create_tag(test_client, auth_headers, "keep")
    response = await test_client.post(
        "/api/tasks", json={"title": "Task", "tags": [tag]}, headers=auth_headers
    )
    task_id = response.json()["task"]["id"]

    response = await test_client.patch(
        f"/api/tasks/{task_id}", json={"status": "completed"}, headers=auth_headers
    )
    task = response.json()["task"]
    assert task["status"] == "completed"
    assert [t["id"] for t in task["tags"]] == [tag]

    response = await test_client.patch(
        f"/api/tasks/{task_id}", json={"tags": []}, headers=auth_headers
    )
    assert response.json()["task"]["tags"] == []


@pytest.mark.asyncio
async def test_list_tasks_filters(test_client: AsyncClient, auth_headers):
    """Test: фильтры по статусу и приоритету, лимит."""
    await test_client.post(
        "/api/tasks", json={"title": "A", "priority": "high"}, headers=auth_headers
    )
    await test_client.post(
        "/api/tasks",
        json={"title": "B", "status": "in_progress", "priority": "high"},
        headers=auth_headers,
    )
    await test_client.post("/api/tasks", json={"title": "C"}, headers=auth_headers)

    response = await test_client.get("/api/tasks?priority=high", headers=auth_headers)
    assert {t["title"] for t in response.json()["tasks"]} == {"A", "B"}

    response = await test_client.get(
        "/api/tasks?priority=high&status=in_progress", headers=auth_headers
    )
    assert [t["title"] for t in response.json()["tasks"]] == ["B"]

    response = await test_client.get("/api/tasks?limit=1", headers=auth_headers)
    assert len(response.json()["tasks"]) == 1

    response = await test_client.get("/api/tasks?limit=1000", headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_tasks_without_limit_returns_all(test_client: AsyncClient, auth_headers):
    """Test: без limit список не обрезается первой страницей."""
    tag_id = await _create_tag(test_client, auth_headers, "bulk")
    for i in range(101):
        response = await test_client.post(
            "/api/tasks", json={"title": f"Task {i}", "tags": [tag_id]}, headers=auth_headers
        )
        assert response.status_code == 201

    response = await test_client.get("/api/tasks", headers=auth_headers)
    assert len(response.json()["tasks"]) == 101

    response = await test_client.get(f"/api/tasks?tag={tag_id}", headers=auth_headers)
    assert len(response.json()["tasks"]) == 101


@pytest.mark.asyncio
async def test_users_are_isolated(test_client: AsyncClient, auth_headers, other_auth_headers):
    """Test: чужая задача - 404 на чтение, изменение и удаление."""
    response = await test_client.post(
        "/api/tasks", json={"title": "Private"}, headers=auth_headers
    )
    task_id = response.json()["task"]["id"]

    response = await test_client.get(f"/api/tasks/{task_id}", headers=other_auth_headers)
    assert response.status_code == 404

    response = await test_client.patch(
        f"/api/tasks/{task_id}", json={"title": "Stolen"}, headers=other_auth_headers
    )
    assert response.status_code == 404

    response = await test_client.delete(f"/api/tasks/{task_id}", headers=other_auth_headers)
    assert response.status_code == 404

    response = await test_client.get("/api/tasks", headers=other_auth_headers)
    assert response.json()["tasks"] == []

    response = await test_client.get(f"/api/tasks/{task_id}", headers=auth_headers)
    assert response.json()["task"]["title"] == "Private"


@pytest.mark.asyncio
async def test_tags_are_isolated(test_client: AsyncClient, auth_headers, other_auth_headers):
    """Test: чужой тег не виден ни в списке, ни по ID, ни через фильтр задач."""
    tag_id = await _create_tag(test_client, auth_headers, "private")
    response = await test_client.post(
        "/api/tasks", json={"title": "Tagged", "tags": [tag_id]}, headers=auth_headers
    )
    assert response.status_code == 201

    response = await test_client.get("/api/tags", headers=other_auth_headers)
    assert response.json()["tags"] == []

    response = await test_client.get(f"/api/tags/{tag_id}", headers=other_auth_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"

    response = await test_client.get(f"/api/tasks?tag={tag_id}", headers=other_auth_headers)
    assert response.status_code == 200
    assert response.json()["tasks"] == []


@pytest.mark.asyncio
async def test_failed_tag_replace_rolls_back(
    test_client: AsyncClient, auth_headers, monkeypatch
):
    """Test: ошибка после удаления старых связей - весь запрос откатывается."""
    t1 = await _create_tag(test_client, auth_headers, "t1")
    t2 = await _create_tag(test_client, auth_headers, "t2")
    response = await test_client.post(
        "/api/tasks", json={"title": "Task", "tags": [t1]}, headers=auth_headers
    )
    task_id = response.json()["task"]["id"]

    calls = []

    async def failing_add(self, task_id: str, tag_ids: list[str]) -> None:
        # delete_for_task уже выполнен в этой транзакции
        calls.append(await self.get_tag_ids(task_id))
        raise ValidationError("Insert failed")

    monkeypatch.setattr(TaskTagRepository, "add", failing_add)

    response = await test_client.patch(
        f"/api/tasks/{task_id}", json={"title": "Renamed", "tags": [t2]}, headers=auth_headers
    )
    assert response.status_code == 400
    assert calls == [[]]

    monkeypatch.undo()

    response = await test_client.get(f"/api/tasks/{task_id}", headers=auth_headers)
    task = response.json()["task"]
    assert task["title"] == "Task"
    assert task["tags"] == [{"id": t1, "name": "t1"}]


# ============================================================================
# SERVICE ENDPOINTS
# ============================================================================


@pytest.mark.asyncio
async def test_root_is_public(test_client: AsyncClient):
    """Test: корневой endpoint без авторизации."""
    response = await test_client.get("/api/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Taskboard"
    assert data["endpoints"]["tasks"] == "/api/tasks"


@pytest.mark.asyncio
async def test_health_check(test_client: AsyncClient, test_engine, monkeypatch):
    """Test: health check на тестовой БД."""
    monkeypatch.setattr(
        taskboard.main,
        "AsyncSessionLocal",
        async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False),
    )

    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"] == "connected"


@pytest.mark.asyncio
async def test_request_id_header(test_client: AsyncClient):
    """Test: X-Request-ID генерируется или берётся из запроса."""
    response = await test_client.get("/api/")
    assert response.headers["X-Request-ID"]

    response = await test_client.get("/api/", headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"
