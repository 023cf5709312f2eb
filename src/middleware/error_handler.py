"""Global exception handlers: map exceptions to structured JSON responses."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.notifications.client import NotificationServiceError
from src.profiles.validation import ProfileValidationError

logger = logging.getLogger(__name__)

TYPE_MAP = {
    400: "validation_error",
    401: "authentication_error",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    502: "upstream_error",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status: int, error_type: str, message: str, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "status": "error",
            "error": {
                "type": error_type,
                "message": message,
                "request_id": request_id,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return _error_response(400, "validation_error", messages, _request_id(request))

    @app.exception_handler(ProfileValidationError)
    async def profile_validation_error(request: Request, exc: ProfileValidationError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: HTTPException):
        error_type = TYPE_MAP.get(exc.status_code, "http_error")
        return _error_response(exc.status_code, error_type, str(exc.detail), _request_id(request))

    @app.exception_handler(IntegrityError)
    async def integrity_error(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return _error_response(409, "conflict", "Resource already exists", _request_id(request))

    @app.exception_handler(NotificationServiceError)
    async def notification_service_error(request: Request, exc: NotificationServiceError):
        logger.error("Notification service error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(502, "upstream_error", "Notification service request failed", _request_id(request))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "internal_error", "An unexpected error occurred", _request_id(request))
