# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer.

This package contains the storage adapters for the user domain:
- database: PostgreSQL via SQLAlchemy async
- memory: In-process store for development and tests
"""
