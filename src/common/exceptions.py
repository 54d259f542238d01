# src/common/exceptions.py
"""
Domain exceptions and their HTTP rendering.
Every service app calls register_exception_handlers(app) once.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.common.logger import log_error, log_warning
from src.shared.models.common import ErrorResponse


class ServiceError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(ServiceError):
    status_code = 404
    error_code = "not_found"


class DuplicateResourceError(ServiceError):
    status_code = 409
    error_code = "duplicate_resource"


class UnauthorizedError(ServiceError):
    """The caller is known but may not touch this resource."""
    status_code = 403
    error_code = "unauthorized"


class AuthenticationError(UnauthorizedError):
    """Credentials are missing or invalid."""
    status_code = 401
    error_code = "unauthenticated"


class InvalidStateError(ServiceError):
    status_code = 400
    error_code = "invalid_state"


class PeerServiceError(ServiceError):
    """A peer service is unreachable or answered with an unexpected status."""
    status_code = 502
    error_code = "peer_service_error"


# =============================================================================
# HANDLERS
# =============================================================================

def _request_id(request: Request) -> str:
    return request.headers.get("X-Request-ID") or uuid.uuid4().hex


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        await log_error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        await log_warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")

    return _render(
        exc.status_code,
        ErrorResponse(
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
            request_id=_request_id(request),
        ),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = _render(
        exc.status_code,
        ErrorResponse(
            error_code="http_error",
            message=str(exc.detail),
            request_id=_request_id(request),
        ),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _render(
        422,
        ErrorResponse(
            error_code="validation_error",
            message="Invalid input data",
            details={"errors": exc.errors()},
            request_id=_request_id(request),
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    await log_error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return _render(
        500,
        ErrorResponse(
            error_code="server_error",
            message="Internal Server Error",
            request_id=_request_id(request),
        ),
    )


def register_exception_handlers(app: FastAPI) -> FastAPI:
    """Registers the error handlers on a FastAPI app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    return app
