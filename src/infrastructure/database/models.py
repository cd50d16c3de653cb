# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

The users table carries a named primary key on id and a named unique
constraint on email. The storage error translator relies on those names
to tell a duplicate id from a duplicate email.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, PrimaryKeyConstraint, String, UniqueConstraint, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import utc_now

USERS_PKEY = "users_pkey"
USERS_EMAIL_KEY = "users_email_key"


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )


class UserModel(TimestampMixin, Base):
    """Row in the users table."""

    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name=USERS_PKEY),
        UniqueConstraint("email", name=USERS_EMAIL_KEY),
    )

    id: Mapped[UUID] = mapped_column(Uuid)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
