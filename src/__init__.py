"""User Account Service Backend.

Create, read, update, delete, list and authenticate user accounts
behind an HTTP API backed by a relational store.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
