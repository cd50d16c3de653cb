# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Stable error code, e.g. E008")
    details: dict[str, str] | None = Field(None, description="Per-field details")
