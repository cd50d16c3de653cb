# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Storage contract for the User aggregate.

Adapters translate engine failures into the domain taxonomy:
missing rows raise UserNotFoundError, uniqueness conflicts raise
UserAlreadyExistsError (DUPLICATE_EMAIL / DUPLICATE_ID), anything they
cannot classify propagates unchanged.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from src.domains.user.entity import Email, User


class UserRepository(ABC):
    """Repository interface for User entity"""

    @abstractmethod
    async def create(self, user: User) -> None:
        """Insert a new user.

        On success the user's timestamps are overwritten with the values
        assigned by the store.

        Raises:
            UserAlreadyExistsError: If the id or email is already taken.
        """

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User:
        """Fetch a user by id.

        Raises:
            UserNotFoundError: If no user has this id.
        """

    @abstractmethod
    async def get_by_email(self, email: Email) -> User:
        """Fetch a user by email address.

        Raises:
            UserNotFoundError: If no user has this email.
        """

    @abstractmethod
    async def update(self, user: User) -> None:
        """Persist email and name of an existing user and refresh updated_at.

        Raises:
            UserNotFoundError: If the id does not exist.
            UserAlreadyExistsError: If the new email belongs to another user.
        """

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user. Deleting an absent id is a successful no-op."""

    @abstractmethod
    async def list_users(self, limit: int, offset: int) -> list[User]:
        """List users ordered by creation time, newest first.

        An offset past the end yields an empty list.
        """
