from __future__ import annotations

from typing import Callable

from fastapi import FastAPI, Request, Response

from api.observability import monotonic_ms, new_request_id, request_log_fields
from api.routes import router
from core.config import get_settings
from core.logging_config import bind_request_id, get_logger, setup_logging, unbind_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _incoming_request_id(request: Request) -> str:
    return (request.headers.get(REQUEST_ID_HEADER) or "").strip() or new_request_id()


def register_request_logging(app: FastAPI) -> None:
    """One access-log line per call, stamped with the caller's (or a fresh) request id."""

    @app.middleware("http")
    async def request_logging(request: Request, call_next: Callable) -> Response:
        request_id = _incoming_request_id(request)
        token = bind_request_id(request_id)
        started_ms = monotonic_ms()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            fields = request_log_fields(
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=monotonic_ms() - started_ms,
                client_ip=getattr(request.client, "host", None),
            )
            if status_code >= 500:
                logger.error("http_request_error", extra=fields)
            else:
                logger.info("http_request", extra=fields)
            unbind_request_id(token)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Launch Monitor Coach API", version="1.0.0")
    app.include_router(router)
    register_request_logging(app)
    return app


app = create_app()
