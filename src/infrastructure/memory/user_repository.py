# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process implementation of UserRepository.

Backs local development (DATABASE_BACKEND=memory) and tests. It enforces
the same contract as the SQL adapter: unique ids and emails, idempotent
delete, newest-first listing and store-assigned timestamps. Stored users
are copies, so callers cannot mutate the store behind its back.
"""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from uuid import UUID

from src.domains.user.entity import Email, User
from src.domains.user.errors import (
    ErrorKind,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from src.domains.user.repository import UserRepository
from src.utils.datetime import utc_now


class InMemoryUserRepository(UserRepository):
    """Dictionary-backed UserRepository guarded by an asyncio lock."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._lock = asyncio.Lock()
        self._last_timestamp: datetime | None = None

    async def create(self, user: User) -> None:
        async with self._lock:
            if user.id in self._users:
                raise UserAlreadyExistsError(ErrorKind.DUPLICATE_ID)
            if self._find_by_email(user.email) is not None:
                raise UserAlreadyExistsError(ErrorKind.DUPLICATE_EMAIL)

            now = self._next_timestamp()
            user.created_at = now
            user.updated_at = now
            self._users[user.id] = replace(user)

    async def get_by_id(self, user_id: UUID) -> User:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is None:
                raise UserNotFoundError(ErrorKind.NOT_FOUND)
            return replace(stored)

    async def get_by_email(self, email: Email) -> User:
        async with self._lock:
            stored = self._find_by_email(email)
            if stored is None:
                raise UserNotFoundError(ErrorKind.NOT_FOUND)
            return replace(stored)

    async def update(self, user: User) -> None:
        async with self._lock:
            stored = self._users.get(user.id)
            if stored is None:
                raise UserNotFoundError(ErrorKind.USER_NOT_FOUND)

            owner = self._find_by_email(user.email)
            if owner is not None and owner.id != user.id:
                raise UserAlreadyExistsError(ErrorKind.DUPLICATE_EMAIL)

            now = self._next_timestamp()
            self._users[user.id] = replace(stored, email=user.email, name=user.name, updated_at=now)
            user.updated_at = now

    async def delete(self, user_id: UUID) -> None:
        async with self._lock:
            self._users.pop(user_id, None)

    async def list_users(self, limit: int, offset: int) -> list[User]:
        async with self._lock:
            ordered = sorted(
                self._users.values(),
                key=lambda u: u.created_at,
                reverse=True,
            )
            return [replace(u) for u in ordered[offset : offset + limit]]

    def _next_timestamp(self) -> datetime:
        # Strictly increasing so creation order is never ambiguous
        now = utc_now()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _find_by_email(self, email: Email) -> User | None:
        for stored in self._users.values():
            if stored.email == email:
                return stored
        return None
