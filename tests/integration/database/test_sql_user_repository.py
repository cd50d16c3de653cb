# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the SQLAlchemy user repository."""

from dataclasses import replace
from uuid import uuid4

import pytest

from src.domains.user.entity import Email, Name, Password, User
from src.domains.user.errors import ErrorKind, UserAlreadyExistsError, UserNotFoundError
from src.infrastructure.database import SQLAlchemyUserRepository, check_database_connection

pytestmark = pytest.mark.integration


def _user(email: str = "jane@example.com", name: str = "Jane Doe") -> User:
    return User.new(
        email=Email(email),
        password=Password("$2b$04$" + "h" * 53),
        name=Name(name),
    )


class TestCreateAndRead:
    """Tests for create, get_by_id and get_by_email."""

    @pytest.mark.asyncio
    async def test_create_and_get_by_id(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test round trip of a created user."""
        user = _user()

        await sql_repository.create(user)
        stored = await sql_repository.get_by_id(user.id)

        assert stored.id == user.id
        assert stored.email == user.email
        assert stored.name == user.name
        assert stored.password == user.password
        assert stored.created_at == user.created_at
        assert stored.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_by_email(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test lookup by email."""
        user = _user()
        await sql_repository.create(user)

        stored = await sql_repository.get_by_email(user.email)

        assert stored.id == user.id

    @pytest.mark.asyncio
    async def test_missing_user_raises_not_found(
        self, sql_repository: SQLAlchemyUserRepository
    ) -> None:
        """Test that absent rows raise NOT_FOUND."""
        with pytest.raises(UserNotFoundError) as exc_info:
            await sql_repository.get_by_id(uuid4())
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

        with pytest.raises(UserNotFoundError):
            await sql_repository.get_by_email(Email("nobody@example.com"))

    @pytest.mark.asyncio
    async def test_duplicate_email_constraint(
        self, sql_repository: SQLAlchemyUserRepository
    ) -> None:
        """Test that the unique constraint surfaces as DUPLICATE_EMAIL."""
        await sql_repository.create(_user())

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await sql_repository.create(_user())

        assert exc_info.value.kind is ErrorKind.DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_duplicate_id_constraint(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test that the primary key surfaces as DUPLICATE_ID."""
        user = _user()
        await sql_repository.create(user)

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await sql_repository.create(replace(user, email=Email("other@example.com")))

        assert exc_info.value.kind is ErrorKind.DUPLICATE_ID


class TestUpdate:
    """Tests for update."""

    @pytest.mark.asyncio
    async def test_update_persists_fields(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test that email and name are written and updated_at refreshed."""
        user = _user()
        await sql_repository.create(user)
        created_at = user.created_at

        user.email = Email("janet@example.com")
        user.name = Name("Janet Doe")
        await sql_repository.update(user)

        stored = await sql_repository.get_by_id(user.id)
        assert stored.email == "janet@example.com"
        assert stored.name == "Janet Doe"
        assert stored.created_at == created_at
        assert stored.updated_at >= created_at

    @pytest.mark.asyncio
    async def test_update_missing_user(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test that updating an absent row raises USER_NOT_FOUND."""
        with pytest.raises(UserNotFoundError) as exc_info:
            await sql_repository.update(_user())

        assert exc_info.value.kind is ErrorKind.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_email_collision(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test that taking another user's email fails with DUPLICATE_EMAIL."""
        await sql_repository.create(_user("first@example.com"))
        second = _user("second@example.com")
        await sql_repository.create(second)

        second.email = Email("first@example.com")
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await sql_repository.update(second)

        assert exc_info.value.kind is ErrorKind.DUPLICATE_EMAIL


class TestDeleteAndList:
    """Tests for delete and list_users."""

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, sql_repository: SQLAlchemyUserRepository) -> None:
        """Test that deleting a missing row succeeds."""
        user = _user()
        await sql_repository.create(user)

        await sql_repository.delete(user.id)
        await sql_repository.delete(user.id)
        await sql_repository.delete(uuid4())

        with pytest.raises(UserNotFoundError):
            await sql_repository.get_by_id(user.id)

    @pytest.mark.asyncio
    async def test_list_users_ordering_and_paging(
        self, sql_repository: SQLAlchemyUserRepository
    ) -> None:
        """Test newest-first ordering, partial pages and empty pages."""
        for i in range(5):
            await sql_repository.create(_user(f"user{i}@example.com", f"User {i:03d}"))

        everything = await sql_repository.list_users(10, 0)
        last_page = await sql_repository.list_users(2, 4)
        past_end = await sql_repository.list_users(10, 100)

        assert len(everything) == 5
        timestamps = [u.created_at for u in everything]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len(last_page) == 1
        assert past_end == []


class TestConnectionCheck:
    """Tests for check_database_connection."""

    @pytest.mark.asyncio
    async def test_reachable_engine(self, db_engine) -> None:
        """Test that a live engine reports reachable."""
        assert await check_database_connection(db_engine) is True
