# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for user operations.

These models are the service-layer DTOs. They intentionally carry no
format constraints: the domain validators decide what is acceptable, so
the same rules apply whether a call comes from HTTP or from code.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domains.user.entity import Email, Name, Password


class UserCreateRequest(BaseModel):
    """Request to create a user."""

    email: Email = Field(..., description="Email address, unique across users")
    name: Name = Field(..., description="Display name (3-255 characters)")
    password: Password = Field(..., description="Plaintext password (8-255 characters)")


class UserUpdateRequest(BaseModel):
    """Request to update a user.

    None means "leave unchanged". An empty string is treated the same
    way, so a field can never be cleared through an update.
    """

    email: Email | None = Field(None, description="New email address")
    name: Name | None = Field(None, description="New display name")


class UserAuthenticateRequest(BaseModel):
    """Request to check an email/password pair."""

    email: Email = Field(..., description="Email address")
    password: Password = Field(..., description="Plaintext password")


class UserResponse(BaseModel):
    """Public projection of a user. Never includes the password."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="User ID")
    email: Email = Field(..., description="Email address")
    name: Name = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class UserListResponse(BaseModel):
    """Response for the user list endpoint."""

    users: list[UserResponse]
    total_count: int = Field(..., description="Number of users in this page")
    limit: int
    offset: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
