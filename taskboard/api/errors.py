"""
Обработчики ошибок (Exception Handlers) для API.

Сервисы бросают доменные исключения (taskboard.core.exceptions),
здесь они превращаются в HTTP ответы формата ErrorResponse (кроме 401):

    UnauthorizedError      -> 401 {"error": "Unauthorized"}
    ValidationError        -> 400
    RequestValidationError -> 400 (ошибки схемы запроса, до обращения к БД)
    NotFoundError          -> 404
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import NotFoundError, TaskboardError, UnauthorizedError, ValidationError
from ..core.logging import get_logger
from .schemas import ErrorBody, ErrorDetail, ErrorResponse, UnauthorizedResponse

logger = get_logger(__name__)

STATUS_BY_ERROR: dict[type[TaskboardError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Собрать JSONResponse в едином формате ErrorResponse."""
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def domain_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    """
    Обработчик доменных ошибок сервисного слоя.

    Статус берётся по первому подходящему классу из STATUS_BY_ERROR,
    неизвестные наследники TaskboardError дают 400.
    """
    status_code = next(
        (code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)),
        status.HTTP_400_BAD_REQUEST,
    )

    logger.warning(
        "API error",
        extra={"code": exc.code, "error_message": exc.message, "path": request.url.path},
    )

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    return error_response(status_code, exc.code, exc.message, details)


async def unauthorized_error_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    """
    401 без сессии.

    Тело короче общего ErrorResponse: фронтенд проверяет body.error === "Unauthorized".
    """
    logger.info("Unauthorized request", extra={"path": request.url.path})

    body = UnauthorizedResponse(error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=body.model_dump(),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Обработчик для ошибок валидации Pydantic.

    Pydantic возвращает ошибки в своём формате:
    {"detail": [{"type": "string_too_short", "loc": ["body", "title"], "msg": "..."}]}

    Мы преобразуем это в наш формат со статусом 400:
    {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "details": [{"field": "title", "message": "..."}]
        }
    }
    """
    logger.warning("Validation error", extra={"errors": exc.errors(), "path": request.url.path})

    details = []
    for error in exc.errors():
        # loc - путь к полю, например ["body", "title"] или ["query", "limit"]
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        if len(field_path) > 1 and field_path[0] in ("body", "query", "path"):
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(
            ErrorDetail(field=str(field_name), message=error.get("msg", "Invalid value"))
        )

    return error_response(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request data", details
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Регистрирует все error handlers в приложении FastAPI.

    Вызывается из main.py:
        register_error_handlers(app)
    """
    app.add_exception_handler(TaskboardError, domain_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    logger.info("Error handlers registered")
