# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the relational user store.

This package provides:
- connection: Async engine and sessionmaker lifecycle
- models: SQLAlchemy ORM models
- errors: Storage error translation into domain errors
- user_repository: SQLAlchemy implementation of UserRepository

Example:
    from src.infrastructure.database import (
        init_database,
        get_sessionmaker,
        SQLAlchemyUserRepository,
    )

    await init_database(settings)
    repository = SQLAlchemyUserRepository(get_sessionmaker())
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    build_sessionmaker,
    check_database_connection,
    close_database,
    create_tables,
    get_engine,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.database.errors import translate_storage_error
from src.infrastructure.database.models import Base, UserModel
from src.infrastructure.database.user_repository import SQLAlchemyUserRepository

__all__ = [
    # Connection
    "DatabaseError",
    "build_engine",
    "build_sessionmaker",
    "check_database_connection",
    "close_database",
    "create_tables",
    "get_engine",
    "get_sessionmaker",
    "init_database",
    # Models
    "Base",
    "UserModel",
    # Repository
    "SQLAlchemyUserRepository",
    "translate_storage_error",
]
