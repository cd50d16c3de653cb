# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module owns the storage lifecycle and hands out service instances:
- init_storage / close_storage: called from the application lifespan
- get_user_service: per-request UserService over the shared repository
- check_storage: readiness probe
- get_app_settings: settings bound to the running application

Example:
    @router.get("/users/{user_id}")
    async def get_user(
        user_id: str,
        service: UserService = Depends(get_user_service),
    ):
        ...
"""

import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, Request, status

from src.domains.auth.password import PasswordHasher
from src.domains.user.repository import UserRepository
from src.domains.user.service import UserService
from src.infrastructure.database import (
    SQLAlchemyUserRepository,
    check_database_connection,
    close_database,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.memory import InMemoryUserRepository

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

# Storage singletons, set by init_storage()
_repository: UserRepository | None = None
_hasher: PasswordHasher | None = None


async def init_storage(settings: "Settings") -> None:
    """Build the password hasher and the configured repository."""
    global _repository, _hasher

    _hasher = PasswordHasher(rounds=settings.security.bcrypt_rounds)

    if settings.database.backend == "memory":
        _repository = InMemoryUserRepository()
        logger.warning("Using in-memory user storage; data is lost on restart")
        return

    await init_database(settings)
    _repository = SQLAlchemyUserRepository(get_sessionmaker())


async def close_storage() -> None:
    """Release storage resources."""
    global _repository, _hasher

    await close_database()
    _repository = None
    _hasher = None


async def check_storage() -> bool:
    """Check whether the configured storage can serve requests."""
    if _repository is None:
        return False
    if isinstance(_repository, InMemoryUserRepository):
        return True
    return await check_database_connection()


def get_user_repository() -> UserRepository:
    """Get the shared user repository.

    Raises:
        HTTPException: 503 if storage has not been initialized.
    """
    if _repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage not initialized",
        )
    return _repository


def get_password_hasher() -> PasswordHasher:
    """Get the shared password hasher.

    Raises:
        HTTPException: 503 if storage has not been initialized.
    """
    if _hasher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage not initialized",
        )
    return _hasher


def get_user_service() -> UserService:
    """Get a user service bound to the shared collaborators."""
    return UserService(repository=get_user_repository(), hasher=get_password_hasher())


def get_app_settings(request: Request) -> "Settings":
    """Get the settings the application was created with."""
    return request.app.state.settings
