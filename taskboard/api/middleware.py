"""HTTP middleware for request logging and tracing."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logging import generate_request_id, get_logger, request_id_var, user_id_var

logger = get_logger("taskboard.requests")

# Не логируем служебные endpoints, чтобы не засорять логи
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware для логирования HTTP запросов.

    Логирует метод, путь, статус, время выполнения и IP клиента.
    Request ID попадает во все логи запроса и в заголовок X-Request-ID.
    Если клиент прислал свой X-Request-ID, используется он.

    Пример лога (JSON):
    {
        "level": "INFO",
        "logger": "taskboard.requests",
        "message": "Request completed",
        "request_id": "abc-123",
        "extra": {"method": "PATCH", "path": "/api/tasks/6a1c...", "status": 200, ...}
    }
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_token = request_id_var.set(request_id)
        # user_id выставит get_current_user после проверки сессии
        user_id_token = user_id_var.set("")

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = int((time.perf_counter() - start_time) * 1000)
                logger.error(
                    "Request failed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": duration_ms,
                        "client_ip": client_ip,
                        "error": str(e),
                    },
                    exc_info=True,
                )
                raise

            duration_ms = int((time.perf_counter() - start_time) * 1000)
            response.headers["X-Request-ID"] = request_id

            if request.url.path not in QUIET_PATHS:
                log = logger.info if response.status_code < 400 else logger.warning
                log(
                    "Request completed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status": response.status_code,
                        "duration_ms": duration_ms,
                        "client_ip": client_ip,
                    },
                )

            return response
        finally:
            request_id_var.reset(request_id_token)
            user_id_var.reset(user_id_token)
