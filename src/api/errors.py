# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mapping of domain errors to HTTP responses.

Every failing request renders an ErrorResponse body:

    {"error": "User not found", "code": "E008"}

Status codes follow the error class: invalid input 400, bad credentials
401, not found 404, duplicates 409, everything else 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domains.user.errors import (
    ErrorKind,
    InvalidCredentialsError,
    InvalidInputError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserServiceError,
)
from src.models.common import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[UserServiceError], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND),
    (UserAlreadyExistsError, status.HTTP_409_CONFLICT),
)

_PUBLIC_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_EMAIL: "Invalid email address",
    ErrorKind.INVALID_NAME: "Invalid name",
    ErrorKind.INVALID_PASSWORD: "Invalid password",
    ErrorKind.INVALID_ID: "Invalid user ID format",
    ErrorKind.INVALID_LIMIT: "Invalid limit",
    ErrorKind.INVALID_OFFSET: "Invalid offset",
    ErrorKind.INVALID_UPDATE_INPUT: "At least one field must be provided for update",
    ErrorKind.INVALID_INPUT: "Invalid input",
    ErrorKind.NOT_FOUND: "User not found",
    ErrorKind.USER_NOT_FOUND: "User not found",
    ErrorKind.USER_ALREADY_EXISTS: "User already exists",
    ErrorKind.DUPLICATE_ID: "User ID already exists",
    ErrorKind.DUPLICATE_EMAIL: "Email already exists",
    ErrorKind.INVALID_CREDENTIALS: "Invalid credentials",
}


def status_for(error: UserServiceError) -> int:
    """HTTP status code for a domain error."""
    for error_class, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    message: str,
    code: str | None = None,
    details: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an ErrorResponse body."""
    body = ErrorResponse(error=message, code=code, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
    """Render a domain error."""
    status_code = status_for(exc)

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Service error on %s %s: %s", request.method, request.url.path, exc)
        return error_response(status_code, "Internal server error", exc.code)

    logger.info("Service error on %s %s: %s", request.method, request.url.path, exc)
    details = {"reason": exc.detail} if exc.detail else None
    return error_response(
        status_code,
        _PUBLIC_MESSAGES.get(exc.kind, exc.message),
        exc.code,
        details,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body/query validation failures as 400."""
    details: dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details[field or "body"] = error.get("msg", "invalid value")
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details=details)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the common error shape."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log and hide unexpected failures."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to an application."""
    app.add_exception_handler(UserServiceError, user_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
