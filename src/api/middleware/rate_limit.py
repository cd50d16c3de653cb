# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

A single global limit (RATE_LIMIT_REQUESTS_PER_MINUTE) is applied per
client IP address through SlowAPIMiddleware. Counters live in process
memory, so each worker enforces the limit independently.

Example:
    >>> app.state.limiter = build_limiter(settings)
    >>> app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    >>> app.add_middleware(SlowAPIMiddleware)
"""

import logging
from typing import TYPE_CHECKING

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.api.errors import error_response

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

# In-process counter storage
RATE_LIMIT_STORAGE_URI = "memory://"


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    return f"ip:{get_remote_address(request)}"


def build_limiter(settings: "Settings") -> Limiter:
    """Create the limiter for an application.

    Args:
        settings: Application settings.

    Returns:
        Limiter applying the configured per-minute default limit.
    """
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
        storage_uri=RATE_LIMIT_STORAGE_URI,
        enabled=settings.rate_limit.enabled,
    )


def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    """Handle rate limit exceeded errors.

    Returns a 429 Too Many Requests response in the common error shape.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        JSON response with error details.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    response = error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests. Please try again later.",
    )
    response.headers["Retry-After"] = "60"
    return response
