# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing utilities using bcrypt.

This module provides salted, deliberately slow password hashing and
verification using the bcrypt library directly.

bcrypt only reads the first 72 bytes of its input, so the plaintext is
first reduced to a base64-encoded SHA-256 digest (44 bytes). Every
password the validators accept, however many bytes it encodes to, hashes
and verifies on its full length.

Example:
    >>> hasher = PasswordHasher(rounds=12)
    >>> hashed = hasher.hash("my_password")
    >>> hasher.compare(hashed, "my_password")
    True
"""

import base64
import hashlib
import logging

import bcrypt

from src.domains.user.errors import PasswordHashingError

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    """Reduce a password to a fixed-length key bcrypt reads in full."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Every call to hash() draws a new salt, so hashing the same password
    twice yields two different strings that both verify.

    Attributes:
        _rounds: bcrypt cost factor used for new hashes.

    Example:
        >>> hasher = PasswordHasher(rounds=4)
        >>> hashed = hasher.hash("secure_password")
        >>> hasher.compare(hashed, "secure_password")
        True
        >>> hasher.compare(hashed, "wrong_password")
        False
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
                   Default is 12 which takes ~250ms on modern hardware.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        """Cost factor applied to new hashes."""
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            PasswordHashingError: If the password is empty or bcrypt
                rejects the salt.
        """
        if not password:
            raise PasswordHashingError(detail="password cannot be empty")

        try:
            salt = bcrypt.gensalt(rounds=self._rounds)
            hashed = bcrypt.hashpw(_prehash(password), salt)
        except ValueError as e:
            logger.warning("Password hashing failed: %s", str(e))
            raise PasswordHashingError(detail=str(e)) from e
        return hashed.decode("utf-8")

    def compare(self, password_hash: str, password: str) -> bool:
        """Check a plaintext candidate against a stored hash.

        Never raises: malformed or foreign hashes simply do not match.

        Args:
            password_hash: Bcrypt hash to verify against.
            password: Plain text candidate.

        Returns:
            True if the password matches the hash, False otherwise.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(
                _prehash(password),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError) as e:
            logger.warning("Password verification failed: %s", str(e))
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a hash was produced with a different cost factor.

        Args:
            password_hash: Existing bcrypt hash, e.g. "$2b$12$...".

        Returns:
            True if the stored cost differs from the configured rounds.
            Unparseable hashes are reported as needing a rehash.
        """
        if not password_hash:
            return False

        parts = password_hash.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True

        return int(parts[2]) != self._rounds
