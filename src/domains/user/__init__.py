# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package.

This package provides the user account domain:
- entity: User aggregate and the Email/Name/Password value objects
- validators: Format rules for the value objects
- errors: ErrorKind taxonomy and exception hierarchy
- repository: Storage contract implemented by infrastructure adapters
- service: UserService orchestrating the use cases

The service lives in src.domains.user.service and is not re-exported here
because it depends on the request models, which depend on this package.

Example:
    >>> from src.domains.user.service import UserService
    >>> service = UserService(repository, password_hasher)
    >>> user = await service.create_user(request)
"""

from src.domains.user.entity import Email, Name, Password, User
from src.domains.user.errors import (
    ErrorKind,
    InvalidCredentialsError,
    InvalidInputError,
    PasswordHashingError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserServiceError,
    error_for,
)
from src.domains.user.repository import UserRepository

__all__ = [
    # Entity
    "User",
    "Email",
    "Name",
    "Password",
    # Errors
    "ErrorKind",
    "UserServiceError",
    "InvalidInputError",
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "InvalidCredentialsError",
    "PasswordHashingError",
    "error_for",
    # Ports
    "UserRepository",
]
