# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

For every request this middleware:
1. Reuses the X-Request-ID header or generates a new id
2. Binds request_id, method and path to the structlog context
3. Enforces the per-request timeout (504 on expiry)
4. Writes one structured access log line

The timeout wraps the downstream application itself rather than the
call_next() wait, so an expired request is cancelled where it runs and
issues no further storage calls after the 504 is sent.

Example:
    GET /api/v1/users
    X-Request-ID: 7d1f...

    -> response carries the same X-Request-ID header
"""

import asyncio
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.api.errors import error_response
from src.utils.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

# Header used to propagate the request id
REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware binding request-scoped logging context and a timeout.

    Attributes:
        _timeout: Seconds a request may run before it is cancelled.
        _downstream: The wrapped application.
    """

    def __init__(self, app: ASGIApp, timeout: float = 60.0) -> None:
        """Initialize the middleware.

        Args:
            app: ASGI application.
            timeout: Per-request timeout in seconds.
        """
        super().__init__(app)
        self._timeout = timeout
        self._downstream = app
        self.app = self._call_with_timeout

    async def _call_with_timeout(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the downstream app, cancelling it once the timeout expires."""
        if scope["type"] != "http":
            await self._downstream(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            async with asyncio.timeout(self._timeout):
                await self._downstream(scope, receive, send_tracking)
        except TimeoutError:
            logger.warning("request timed out", timeout_seconds=self._timeout)
            if response_started:
                raise
            response = error_response(
                status.HTTP_504_GATEWAY_TIMEOUT,
                "Request timed out",
            )
            await response(scope, receive, send)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request inside a bound logging context.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response with the X-Request-ID header set.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        clear_context()
        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            return response
        finally:
            clear_context()
