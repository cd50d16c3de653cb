# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for account management.

This module provides the UserService that handles:
- User creation with password hashing and duplicate detection
- Lookup by id or email
- Partial updates of email and name
- Idempotent deletion
- Paginated listing
- Email/password authentication

The service keeps no state between calls; the repository and the password
hasher are injected, so one instance can serve concurrent requests.
Hashing is CPU bound and runs in a worker thread. If the calling task is
cancelled while it waits, the cancellation propagates and nothing is
written.

Example:
    >>> user_service = UserService(repository, PasswordHasher(rounds=12))
    >>> user = await user_service.create_user(request)
    >>> users = await user_service.list_users(limit=10, offset=0)
"""

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID

from src.domains.user.entity import Email, Password, User, is_valid_user_id
from src.domains.user.errors import (
    ErrorKind,
    InvalidCredentialsError,
    InvalidInputError,
    PasswordHashingError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from src.domains.user.repository import UserRepository
from src.domains.user.validators import validate_email, validate_name, validate_password
from src.models.user import (
    UserAuthenticateRequest,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

if TYPE_CHECKING:
    from src.domains.auth.password import PasswordHasher

logger = logging.getLogger(__name__)


class UserService:
    """Service orchestrating the user account use cases.

    Each operation validates its input first and stops at the first
    failure, so a rejected request never reaches the hasher or the store.
    Repository errors propagate unchanged.

    Attributes:
        _repository: User storage adapter.
        _hasher: Password hasher.

    Example:
        >>> service = UserService(repository, hasher)
        >>> await service.authenticate_user(
        ...     UserAuthenticateRequest(email="a@example.com", password="secret123")
        ... )
    """

    def __init__(self, repository: UserRepository, hasher: "PasswordHasher") -> None:
        """Initialize the user service.

        Args:
            repository: Storage adapter implementing UserRepository.
            hasher: Password hasher with hash() and compare().
        """
        self._repository = repository
        self._hasher = hasher

    async def create_user(self, request: UserCreateRequest) -> UserResponse:
        """Create a new user.

        Args:
            request: User creation request with plaintext password.

        Returns:
            Public projection of the created user.

        Raises:
            InvalidInputError: If email, name or password is missing or malformed.
            PasswordHashingError: If the password could not be hashed.
            UserAlreadyExistsError: If the email is already registered.
        """
        if not request.email:
            raise InvalidInputError(ErrorKind.INVALID_EMAIL, "email is required")
        if not request.name:
            raise InvalidInputError(ErrorKind.INVALID_NAME, "name is required")
        if not request.password:
            raise InvalidInputError(ErrorKind.INVALID_PASSWORD, "password is required")

        # Length rules apply to the plaintext, before the hash replaces it
        validate_password(request.password)

        hashed_password = await self._hash_password(request.password)

        user = User.new(request.email, Password(hashed_password), request.name)
        validate_email(user.email)
        validate_name(user.name)

        # Advisory only: the unique constraint in the store is authoritative
        await self._ensure_email_available(user.email)

        await self._repository.create(user)

        logger.info("User created: %s", user.id)
        return self._to_response(user)

    async def get_user_by_id(self, user_id: UUID) -> UserResponse:
        """Get a user by id.

        Raises:
            InvalidInputError: INVALID_ID if the id is missing or nil.
            UserNotFoundError: If no user has this id.
        """
        if not is_valid_user_id(user_id):
            raise InvalidInputError(ErrorKind.INVALID_ID)

        user = await self._repository.get_by_id(user_id)
        return self._to_response(user)

    async def get_user_by_email(self, email: Email) -> UserResponse:
        """Get a user by email address.

        Raises:
            InvalidInputError: INVALID_EMAIL if the email is empty or malformed.
            UserNotFoundError: If no user has this email.
        """
        if not email:
            raise InvalidInputError(ErrorKind.INVALID_EMAIL, "email is required")
        validate_email(email)

        user = await self._repository.get_by_email(email)
        return self._to_response(user)

    async def update_user(self, user_id: UUID, request: UserUpdateRequest) -> None:
        """Update email and/or name of a user.

        Fields that are None or empty are left unchanged. The aggregate is
        validated as a whole before anything is written, so a bad name also
        keeps a good email from being stored.

        Args:
            user_id: User to update.
            request: New values.

        Raises:
            InvalidInputError: INVALID_ID, INVALID_UPDATE_INPUT when no field
                is provided, or INVALID_EMAIL / INVALID_NAME for bad values.
            UserNotFoundError: If the user does not exist.
            UserAlreadyExistsError: If the new email belongs to another user.
        """
        if not is_valid_user_id(user_id):
            raise InvalidInputError(ErrorKind.INVALID_ID)

        new_email = request.email or None
        new_name = request.name or None
        if new_email is None and new_name is None:
            raise InvalidInputError(ErrorKind.INVALID_UPDATE_INPUT)

        user = await self._repository.get_by_id(user_id)

        if new_email is not None:
            user.update_email(new_email)
        if new_name is not None:
            user.update_name(new_name)

        user.validate()

        await self._repository.update(user)
        logger.info("User updated: %s", user_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user. Deleting an unknown id succeeds.

        Raises:
            InvalidInputError: INVALID_ID if the id is missing or nil.
        """
        if not is_valid_user_id(user_id):
            raise InvalidInputError(ErrorKind.INVALID_ID)

        await self._repository.delete(user_id)
        logger.info("User deleted: %s", user_id)

    async def list_users(self, limit: int, offset: int) -> list[UserResponse]:
        """List users, newest first.

        Args:
            limit: Page size, must be positive.
            offset: Number of users to skip, must not be negative.

        Returns:
            Public projections for the page; empty past the end.

        Raises:
            InvalidInputError: INVALID_LIMIT or INVALID_OFFSET.
        """
        if limit <= 0:
            raise InvalidInputError(ErrorKind.INVALID_LIMIT, f"limit must be positive (got {limit})")
        if offset < 0:
            raise InvalidInputError(
                ErrorKind.INVALID_OFFSET, f"offset must not be negative (got {offset})"
            )

        users = await self._repository.list_users(limit, offset)
        return [self._to_response(user) for user in users]

    async def authenticate_user(self, request: UserAuthenticateRequest) -> None:
        """Check an email/password pair.

        Issuing sessions or tokens is up to the caller. A hash stored with
        a different cost factor than the configured one is reported in the
        log so it can be refreshed on the next password change.

        Raises:
            InvalidInputError: If email or password is empty.
            UserNotFoundError: If no user has this email.
            InvalidCredentialsError: If the password does not match.
        """
        if not request.email:
            raise InvalidInputError(ErrorKind.INVALID_EMAIL, "email is required")
        if not request.password:
            raise InvalidInputError(ErrorKind.INVALID_PASSWORD, "password is required")

        user = await self._repository.get_by_email(request.email)

        matches = await asyncio.to_thread(self._hasher.compare, user.password, request.password)
        if not matches:
            logger.info("Authentication failed for user: %s", user.id)
            raise InvalidCredentialsError()

        logger.debug("Authentication succeeded for user: %s", user.id)

        if self._hasher.needs_rehash(user.password):
            logger.info("Password hash for user %s uses an outdated cost factor", user.id)

    async def _hash_password(self, password: str) -> str:
        """Hash a plaintext password off the event loop."""
        try:
            return await asyncio.to_thread(self._hasher.hash, password)
        except PasswordHashingError:
            logger.error("Password hashing failed")
            raise
        except Exception as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise PasswordHashingError(detail=str(e)) from e

    async def _ensure_email_available(self, email: Email) -> None:
        """Reject the email if a user already has it.

        Only a not-found answer means the email is free; any other lookup
        failure propagates instead of being taken as "no such user".
        """
        try:
            await self._repository.get_by_email(email)
        except UserNotFoundError:
            return
        raise UserAlreadyExistsError(ErrorKind.USER_ALREADY_EXISTS)

    @staticmethod
    def _to_response(user: User) -> UserResponse:
        """Project a user to its public shape."""
        return UserResponse.model_validate(user)
