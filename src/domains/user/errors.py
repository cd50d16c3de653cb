# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy for user accounts.

Every failure the user domain can report is one ErrorKind. Kinds are a
closed enumeration with stable machine-readable codes; exceptions carry a
kind and are compared by it, never by message text.

The exception classes group kinds by how callers react to them:

- InvalidInputError: the request was malformed (all Invalid* kinds)
- UserNotFoundError: the addressed user does not exist
- UserAlreadyExistsError: a uniqueness constraint would be violated
- InvalidCredentialsError: authentication failed
- PasswordHashingError: the password could not be hashed

Example:
    >>> try:
    ...     await service.get_user_by_id(user_id)
    ... except UserNotFoundError as e:
    ...     print(e.kind.code)
    E008
"""

from enum import Enum


class ErrorKind(Enum):
    """Canonical domain failure kinds."""

    INVALID_EMAIL = ("E001", "invalid email")
    INVALID_NAME = ("E002", "invalid name")
    INVALID_PASSWORD = ("E003", "invalid password")
    INVALID_ID = ("E004", "invalid id")
    INVALID_LIMIT = ("E005", "invalid limit")
    INVALID_OFFSET = ("E006", "invalid offset")
    INVALID_UPDATE_INPUT = (
        "E007",
        "invalid update input: at least one field must be provided for update",
    )
    NOT_FOUND = ("E008", "not found")
    USER_NOT_FOUND = ("E009", "user not found")
    USER_ALREADY_EXISTS = ("E010", "user already exists")
    DUPLICATE_ID = ("E011", "id already exists")
    DUPLICATE_EMAIL = ("E012", "email already exists")
    INVALID_INPUT = ("E013", "invalid input")
    INVALID_CREDENTIALS = ("E014", "invalid credentials")
    HASHING_FAILURE = ("E015", "failed to hash password")

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message


class UserServiceError(Exception):
    """Base exception for user domain errors.

    Attributes:
        kind: The ErrorKind this error reports.
        detail: Optional context (which check failed, which column, ...).
    """

    kinds: frozenset[ErrorKind] = frozenset(ErrorKind)
    default_kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, kind: ErrorKind | None = None, detail: str | None = None) -> None:
        kind = kind or self.default_kind
        if kind not in self.kinds:
            raise TypeError(f"{type(self).__name__} cannot carry {kind.name}")
        self.kind = kind
        self.detail = detail
        super().__init__(str(self))

    @property
    def code(self) -> str:
        """Stable machine-readable code of the error kind."""
        return self.kind.code

    @property
    def message(self) -> str:
        """Human-readable message of the error kind."""
        return self.kind.message

    def __str__(self) -> str:
        if self.detail:
            return f"[{self.kind.code}] {self.kind.message}: {self.detail}"
        return f"[{self.kind.code}] {self.kind.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.name}, detail={self.detail!r})"


class InvalidInputError(UserServiceError):
    """Raised when request data fails validation."""

    kinds = frozenset(
        {
            ErrorKind.INVALID_EMAIL,
            ErrorKind.INVALID_NAME,
            ErrorKind.INVALID_PASSWORD,
            ErrorKind.INVALID_ID,
            ErrorKind.INVALID_LIMIT,
            ErrorKind.INVALID_OFFSET,
            ErrorKind.INVALID_UPDATE_INPUT,
            ErrorKind.INVALID_INPUT,
        }
    )
    default_kind = ErrorKind.INVALID_INPUT


class UserNotFoundError(UserServiceError):
    """Raised when a user is not found."""

    kinds = frozenset({ErrorKind.NOT_FOUND, ErrorKind.USER_NOT_FOUND})
    default_kind = ErrorKind.NOT_FOUND


class UserAlreadyExistsError(UserServiceError):
    """Raised when a user with the same id or email already exists."""

    kinds = frozenset(
        {
            ErrorKind.USER_ALREADY_EXISTS,
            ErrorKind.DUPLICATE_ID,
            ErrorKind.DUPLICATE_EMAIL,
        }
    )
    default_kind = ErrorKind.USER_ALREADY_EXISTS


class InvalidCredentialsError(UserServiceError):
    """Raised when an email/password pair does not authenticate."""

    kinds = frozenset({ErrorKind.INVALID_CREDENTIALS})
    default_kind = ErrorKind.INVALID_CREDENTIALS


class PasswordHashingError(UserServiceError):
    """Raised when the password hasher cannot produce a hash."""

    kinds = frozenset({ErrorKind.HASHING_FAILURE})
    default_kind = ErrorKind.HASHING_FAILURE


_ERROR_CLASSES: tuple[type[UserServiceError], ...] = (
    InvalidInputError,
    UserNotFoundError,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    PasswordHashingError,
)


def error_for(kind: ErrorKind, detail: str | None = None) -> UserServiceError:
    """Build the exception matching an error kind.

    Args:
        kind: Error kind to report.
        detail: Optional context for the message.

    Returns:
        An instance of the exception class that groups this kind.
    """
    for error_class in _ERROR_CLASSES:
        if kind in error_class.kinds:
            return error_class(kind, detail)
    return UserServiceError(kind, detail)
