# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User aggregate and its value objects.

Email, Name and Password share a str representation but are distinct
types, so a type checker rejects passing a Name where an Email is
expected. The User aggregate only changes through its update_* methods,
which validate the new value before committing it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType
from uuid import UUID, uuid4

from src.domains.user.validators import validate_email, validate_name, validate_password
from src.utils.datetime import utc_now

Email = NewType("Email", str)
Name = NewType("Name", str)
Password = NewType("Password", str)

NIL_USER_ID = UUID(int=0)


def is_valid_user_id(user_id: UUID | None) -> bool:
    """Return True unless the id is missing or the nil UUID."""
    return user_id is not None and user_id != NIL_USER_ID


@dataclass(kw_only=True)
class User:
    """User domain entity.

    Attributes:
        id: Opaque identifier, immutable after creation.
        email: Unique email address.
        name: Display name.
        password: bcrypt hash once the user is built by the service;
            never the plaintext.
        created_at: Creation instant (UTC), set once.
        updated_at: Last successful mutation (UTC).
    """

    id: UUID = field(default_factory=uuid4)
    email: Email
    name: Name
    password: Password
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    @classmethod
    def new(cls, email: Email, password: Password, name: Name) -> "User":
        """Create a user with a fresh id and matching timestamps."""
        now = utc_now()
        return cls(
            id=uuid4(),
            email=email,
            name=name,
            password=password,
            created_at=now,
            updated_at=now,
        )

    def validate(self) -> None:
        """Check the aggregate invariants.

        Raises:
            InvalidInputError: For the first field that fails its format rule.
        """
        validate_email(self.email)
        validate_name(self.name)
        validate_password(self.password)

    def update_name(self, name: Name) -> None:
        """Replace the name after validating it."""
        validate_name(name)
        self.name = name
        self._touch()

    def update_email(self, email: Email) -> None:
        """Replace the email after validating it."""
        validate_email(email)
        self.email = email
        self._touch()

    def update_password(self, password: Password) -> None:
        """Replace the stored password after validating it."""
        validate_password(password)
        self.password = password
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utc_now()
