# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.

Modules:
    users: User account endpoints (CRUD, lookup by email, authenticate).
"""

from fastapi import APIRouter

from src.api.v1 import users

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(users.router, prefix="/users", tags=["Users"])

__all__ = ["router"]
