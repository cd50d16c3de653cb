# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Provides an engine and sessionmaker over an in-memory SQLite database.
Set TEST_DATABASE_URL to run the same tests against PostgreSQL.
"""

import os

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.infrastructure.database import Base, SQLAlchemyUserRepository, build_sessionmaker


@pytest.fixture(scope="session")
def database_url() -> str:
    """Get database URL for tests."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url: str):
    """Create async engine with a fresh schema."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine) -> async_sessionmaker[AsyncSession]:
    """Create sessionmaker bound to the test engine."""
    return build_sessionmaker(db_engine)


@pytest.fixture
def sql_repository(db_sessionmaker) -> SQLAlchemyUserRepository:
    """Create the SQLAlchemy user repository under test."""
    return SQLAlchemyUserRepository(db_sessionmaker)
