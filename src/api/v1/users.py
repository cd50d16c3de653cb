# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User account API endpoints.

This module provides endpoints for user account management:
- POST / - Create a new user
- GET / - List users, newest first
- GET /by-email - Get a user by email address
- POST /authenticate - Check an email/password pair
- GET /{user_id} - Get user details
- PUT /{user_id} - Update email and/or name
- DELETE /{user_id} - Delete user (idempotent)

Domain errors raised by the service are rendered by the handlers in
src.api.errors, so the endpoints here stay thin.

Example:
    POST /api/v1/users
    {
        "email": "jane@example.com",
        "name": "Jane Doe",
        "password": "correct-horse"
    }
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_app_settings, get_user_service
from src.core.config import Settings
from src.domains.user.entity import Email
from src.domains.user.errors import ErrorKind, InvalidInputError
from src.domains.user.service import UserService
from src.models.user import (
    MessageResponse,
    UserAuthenticateRequest,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_user_id(raw: str) -> UUID:
    """Parse a user id path parameter.

    Raises:
        InvalidInputError: If the value is not a UUID.
    """
    try:
        return UUID(raw)
    except ValueError:
        raise InvalidInputError(ErrorKind.INVALID_ID, "invalid user ID format") from None


def resolve_limit(raw: str | None, default: int, maximum: int) -> int:
    """Resolve the page size, falling back to the default when out of range."""
    try:
        limit = int(raw) if raw is not None else default
    except ValueError:
        return default
    if limit < 1 or limit > maximum:
        return default
    return limit


def resolve_offset(raw: str | None) -> int:
    """Resolve the page offset; unparseable or negative values mean 0."""
    try:
        offset = int(raw) if raw is not None else 0
    except ValueError:
        return 0
    return max(offset, 0)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a new user account.",
)
async def create_user(
    data: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a new user.

    Args:
        data: User creation request.
        service: User service.

    Returns:
        Created user response.
    """
    return await service.create_user(data)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users, newest first.",
)
async def list_users(
    limit: Annotated[str | None, Query(description="Maximum results (1-100)")] = None,
    offset: Annotated[str | None, Query(description="Pagination offset")] = None,
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
) -> UserListResponse:
    """List users.

    Out-of-range or unparseable pagination values fall back to defaults
    instead of failing the request.

    Args:
        limit: Requested page size.
        offset: Requested offset.
        service: User service.
        settings: Application settings.

    Returns:
        One page of users with pagination info.
    """
    page_limit = resolve_limit(
        limit,
        settings.pagination.default_limit,
        settings.pagination.max_limit,
    )
    page_offset = resolve_offset(offset)

    users = await service.list_users(page_limit, page_offset)

    return UserListResponse(
        users=users,
        total_count=len(users),
        limit=page_limit,
        offset=page_offset,
    )


@router.get(
    "/by-email",
    response_model=UserResponse,
    summary="Get user by email",
)
async def get_user_by_email(
    email: Annotated[str, Query(description="Email address")] = "",
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Get a user by email address."""
    return await service.get_user_by_email(Email(email))


@router.post(
    "/authenticate",
    response_model=MessageResponse,
    summary="Authenticate user",
    description="Check an email/password pair.",
)
async def authenticate_user(
    data: UserAuthenticateRequest,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Authenticate a user.

    Args:
        data: Email and password.
        service: User service.

    Returns:
        Acknowledgement message.
    """
    await service.authenticate_user(data)
    return MessageResponse(message="Authentication successful")


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
    description="Get user details by ID.",
)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Get user details."""
    return await service.get_user_by_id(parse_user_id(user_id))


@router.put(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Update user",
    description="Update email and/or name. Omitted fields are left unchanged.",
)
async def update_user(
    user_id: str,
    data: UserUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Update user information.

    Args:
        user_id: User identifier.
        data: Update request.
        service: User service.

    Returns:
        Acknowledgement message.
    """
    await service.update_user(parse_user_id(user_id), data)
    return MessageResponse(message="User updated successfully")


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description="Delete a user. Deleting an absent user also succeeds.",
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user."""
    await service.delete_user(parse_user_id(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
