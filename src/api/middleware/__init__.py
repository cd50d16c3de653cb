# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

This package provides middleware for request processing:
- RequestContextMiddleware: Request id, logging context, timeout.
- Rate limiting helpers around slowapi.

Exports:
    RequestContextMiddleware: Request context middleware.
    build_limiter: Limiter factory.
    rate_limit_exceeded_handler: 429 response handler.
"""

from src.api.middleware.rate_limit import build_limiter, rate_limit_exceeded_handler
from src.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "build_limiter",
    "rate_limit_exceeded_handler",
]
