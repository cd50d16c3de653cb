# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides liveness and readiness endpoints for the API:
- /healthz: the process is up
- /readyz: the user storage can serve requests
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from src.api.dependencies import check_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthz", response_class=PlainTextResponse)
async def liveness_check() -> str:
    """Report that the API process is alive."""
    return "OK"


@router.get("/readyz", response_class=PlainTextResponse)
async def readiness_check() -> PlainTextResponse:
    """Check if the API is ready to accept traffic.

    Pings the configured storage backend.

    Returns:
        200 "Ready" when storage is reachable, 503 "Not Ready" otherwise.
    """
    start = time.time()
    ready = await check_storage()
    latency = (time.time() - start) * 1000

    if not ready:
        logger.error("Readiness check failed: storage unreachable")
        return PlainTextResponse(
            "Not Ready",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    logger.debug("Readiness check passed in %.2f ms", latency)
    return PlainTextResponse("Ready")
