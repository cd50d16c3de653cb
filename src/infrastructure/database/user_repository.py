# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy implementation of UserRepository.

Every operation opens its own session and transaction, so one repository
instance can be shared by concurrent requests. Engine errors are
translated into domain errors; unrecognized ones propagate unchanged.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domains.user.entity import Email, Name, Password, User
from src.domains.user.errors import ErrorKind, UserNotFoundError
from src.domains.user.repository import UserRepository
from src.infrastructure.database.errors import translate_storage_error
from src.infrastructure.database.models import UserModel
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of UserRepository"""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Run a block in one transaction, translating storage errors."""
        try:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            domain_error = translate_storage_error(e)
            if domain_error is None:
                raise
            raise domain_error from e

    async def create(self, user: User) -> None:
        """Insert a user and take over the store-assigned timestamps."""
        now = utc_now()
        stmt = (
            insert(UserModel)
            .values(
                id=user.id,
                email=user.email,
                name=user.name,
                password=user.password,
                created_at=now,
                updated_at=now,
            )
            .returning(UserModel.created_at, UserModel.updated_at)
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            created_at, updated_at = result.one()

        user.created_at = ensure_utc(created_at)
        user.updated_at = ensure_utc(updated_at)

    async def get_by_id(self, user_id: UUID) -> User:
        """Find a user by ID"""
        async with self._transaction() as session:
            result = await session.execute(select(UserModel).where(UserModel.id == user_id))
            db_user = result.scalar_one()
        return self._to_domain(db_user)

    async def get_by_email(self, email: Email) -> User:
        """Find a user by email address"""
        async with self._transaction() as session:
            result = await session.execute(select(UserModel).where(UserModel.email == email))
            db_user = result.scalar_one()
        return self._to_domain(db_user)

    async def update(self, user: User) -> None:
        """Persist email and name, then take over the new updated_at."""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(email=user.email, name=user.name, updated_at=utc_now())
            .returning(UserModel.updated_at)
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            updated_at = result.scalar_one_or_none()

        if updated_at is None:
            raise UserNotFoundError(ErrorKind.USER_NOT_FOUND)

        user.updated_at = ensure_utc(updated_at)

    async def delete(self, user_id: UUID) -> None:
        """Delete a user; absent ids are ignored."""
        async with self._transaction() as session:
            result = await session.execute(delete(UserModel).where(UserModel.id == user_id))
            deleted = result.rowcount

        if deleted == 0:
            logger.debug("Delete of unknown user ignored: %s", user_id)

    async def list_users(self, limit: int, offset: int) -> list[User]:
        """List users, newest first."""
        stmt = (
            select(UserModel)
            .order_by(UserModel.created_at.desc(), UserModel.id)
            .limit(limit)
            .offset(offset)
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            db_users = result.scalars().all()
        return [self._to_domain(u) for u in db_users]

    @staticmethod
    def _to_domain(db_user: UserModel) -> User:
        """Convert database model to domain model"""
        return User(
            id=db_user.id,
            email=Email(db_user.email),
            name=Name(db_user.name),
            password=Password(db_user.password),
            created_at=ensure_utc(db_user.created_at),
            updated_at=ensure_utc(db_user.updated_at),
        )
