# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Format rules for user value objects.

Each validator returns None when the value is acceptable and raises
InvalidInputError with the matching kind otherwise. They have no side
effects and are safe to call from any layer.
"""

import re

from src.domains.user.errors import ErrorKind, InvalidInputError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 255


def validate_email(email: str) -> None:
    """Check that an email looks like local-part@domain.tld.

    Raises:
        InvalidInputError: INVALID_EMAIL if empty or malformed.
    """
    if not email:
        raise InvalidInputError(ErrorKind.INVALID_EMAIL, "email is empty")
    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidInputError(ErrorKind.INVALID_EMAIL, "email format is invalid")


def validate_name(name: str) -> None:
    """Check that a name is between 3 and 255 characters.

    Length counts characters, so multi-byte names are not penalized.

    Raises:
        InvalidInputError: INVALID_NAME if empty or out of range.
    """
    if not name:
        raise InvalidInputError(ErrorKind.INVALID_NAME, "name is empty")
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidInputError(
            ErrorKind.INVALID_NAME,
            f"name length is invalid (len={len(name)})",
        )


def validate_password(password: str) -> None:
    """Check that a password is between 8 and 255 characters.

    Raises:
        InvalidInputError: INVALID_PASSWORD if empty or out of range.
    """
    if not password:
        raise InvalidInputError(ErrorKind.INVALID_PASSWORD, "password is empty")
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        # Never echo the password itself
        raise InvalidInputError(
            ErrorKind.INVALID_PASSWORD,
            f"password length is invalid (len={len(password)})",
        )
