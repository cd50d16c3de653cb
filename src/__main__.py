# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the user account API with uvicorn.

Usage:
    python -m src
"""

import logging

import uvicorn

from src.core.config import get_settings
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the HTTP server using API_* settings."""
    settings = get_settings()
    setup_logging(settings)

    logger.info("Listening on %s:%d", settings.api.host, settings.api.port)
    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=settings.api.workers,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
