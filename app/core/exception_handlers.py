"""Maps memorial and storage errors to JSON responses.

Every error body has the shape {"error", "message", "details"}. Status comes
from the exception's error_code; codes not listed below are client errors.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import MemorialException

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "LIFECYCLE_CONFLICT": 409,
    "HISTORY_WRITE_FAILED": 500,
    "STORAGE_DELETE_ERROR": 502,
    "STORAGE_PRESIGN_ERROR": 502,
    "STORAGE_NOT_CONFIGURED": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for(exc: MemorialException) -> int:
    return STATUS_BY_ERROR_CODE.get(exc.error_code, 400)


def _error(status: int, code: str, message: Any, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"error": code, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status, content=body)


def _on_memorial_error(request: Request, exc: MemorialException) -> JSONResponse:
    status = status_for(exc)
    route = f"{request.method} {request.url.path}"
    if status >= 500:
        logger.error("%s on %s: %s %s", exc.error_code, route, exc.message, exc.details)
    elif status == 409:
        logger.info("Lifecycle conflict on %s: %s", route, exc.details.get("reason"))
    return JSONResponse(status_code=status, content=exc.to_dict())


def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(422, "VALIDATION_ERROR", "Request validation failed", exc.errors())


def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, "HTTP_ERROR", exc.detail)


def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MemorialException, _on_memorial_error)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled)
