# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models."""

from src.models.common import ErrorResponse
from src.models.user import (
    MessageResponse,
    UserAuthenticateRequest,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "UserAuthenticateRequest",
    "UserCreateRequest",
    "UserListResponse",
    "UserResponse",
    "UserUpdateRequest",
]
