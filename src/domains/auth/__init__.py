# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication building blocks.

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
"""

from src.domains.auth.password import PasswordHasher

__all__ = [
    "PasswordHasher",
]
