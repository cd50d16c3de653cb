# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process storage adapters."""

from src.infrastructure.memory.user_repository import InMemoryUserRepository

__all__ = ["InMemoryUserRepository"]
