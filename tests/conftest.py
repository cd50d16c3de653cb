# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from typing import Any

import pytest

from src.domains.auth.password import PasswordHasher
from src.domains.user.entity import Email, Name, Password, User
from src.domains.user.service import UserService
from src.infrastructure.memory import InMemoryUserRepository

# Lowest cost bcrypt accepts, keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "false",
        "LOG_LEVEL": "DEBUG",
        "DATABASE_BACKEND": "memory",
        "SECURITY_BCRYPT_ROUNDS": str(TEST_BCRYPT_ROUNDS),
        "RATE_LIMIT_ENABLED": "false",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def hasher() -> PasswordHasher:
    """Provide a fast password hasher."""
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    """Provide an empty in-memory user repository."""
    return InMemoryUserRepository()


@pytest.fixture
def user_service(
    memory_repository: InMemoryUserRepository,
    hasher: PasswordHasher,
) -> UserService:
    """Provide a user service over the in-memory repository."""
    return UserService(repository=memory_repository, hasher=hasher)


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_user_data() -> dict[str, Any]:
    """Provide sample user creation data for testing."""
    return {
        "email": "jane.doe@example.com",
        "name": "Jane Doe",
        "password": "correct-horse-battery",
    }


@pytest.fixture
def sample_user(hasher: PasswordHasher, sample_user_data: dict[str, Any]) -> User:
    """Provide a valid user with a hashed password."""
    return User.new(
        email=Email(sample_user_data["email"]),
        password=Password(hasher.hash(sample_user_data["password"])),
        name=Name(sample_user_data["name"]),
    )
