# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain layer for the user account service.

This package contains the business logic, independent of HTTP and storage.

Domains:
    user: User entity, validation rules, repository port and service.
    auth: Password hashing.
"""
