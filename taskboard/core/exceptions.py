"""Domain exceptions raised by the service layer.

The API layer maps them to HTTP responses in ``taskboard.api.errors``.
"""


class TaskboardError(Exception):
    """Base class for all domain errors."""

    code = "ERROR"

    def __init__(self, message: str, details: list[dict] | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class UnauthorizedError(TaskboardError):
    """No session, or the session is invalid or expired."""

    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(TaskboardError):
    """
    Ресурс не найден у текущего пользователя.

    Чужие записи тоже дают NotFound, чтобы не раскрывать их существование.

    Использование:
        raise NotFoundError("Task", task_id)
        # Сообщение: "Task with id=... not found"
    """

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with id={resource_id} not found")


class ValidationError(TaskboardError):
    """Business-rule validation failure (blank title, foreign tag id, ...)."""

    code = "VALIDATION_ERROR"
