# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation of storage engine errors into domain errors.

PostgreSQL reports constraint failures through SQLSTATE codes. SQLite
(used in tests) reports extended error names instead, which are mapped to
the equivalent SQLSTATE so both engines go through the same rules.

Errors that match no rule are not translated; callers re-raise them
unchanged and treat them as unclassified.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import DBAPIError, NoResultFound, SQLAlchemyError

from src.domains.user.errors import ErrorKind, UserServiceError, error_for

logger = logging.getLogger(__name__)

# PostgreSQL error codes
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_NOT_NULL_VIOLATION = "23502"
PG_CHECK_VIOLATION = "23514"
PG_INVALID_TEXT_REPRESENTATION = "22P02"
PG_DATA_EXCEPTION = "22000"

_SQLITE_TO_SQLSTATE = {
    "SQLITE_CONSTRAINT_UNIQUE": PG_UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_PRIMARYKEY": PG_UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_FOREIGNKEY": PG_FOREIGN_KEY_VIOLATION,
    "SQLITE_CONSTRAINT_NOTNULL": PG_NOT_NULL_VIOLATION,
    "SQLITE_CONSTRAINT_CHECK": PG_CHECK_VIOLATION,
    "SQLITE_MISMATCH": PG_DATA_EXCEPTION,
}


@dataclass(frozen=True)
class StorageDiagnostics:
    """Engine-neutral view of a failed statement."""

    code: str | None
    constraint: str = ""
    detail: str = ""
    column: str = ""


def extract_diagnostics(error: DBAPIError) -> StorageDiagnostics:
    """Pull SQLSTATE, constraint, detail and column out of a driver error.

    Works with asyncpg (through SQLAlchemy's adapter), psycopg and sqlite3.
    """
    orig = error.orig
    if orig is None:
        return StorageDiagnostics(code=None)

    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)

    # asyncpg keeps the details on the exception wrapped by the adapter
    source = orig.__cause__ or orig
    constraint = getattr(source, "constraint_name", None) or ""
    detail = getattr(source, "detail", None) or ""
    column = getattr(source, "column_name", None) or ""

    diag = getattr(orig, "diag", None)
    if diag is not None:
        constraint = constraint or getattr(diag, "constraint_name", None) or ""
        detail = detail or getattr(diag, "message_detail", None) or ""
        column = column or getattr(diag, "column_name", None) or ""

    if code is None:
        sqlite_name = getattr(orig, "sqlite_errorname", None)
        code = _SQLITE_TO_SQLSTATE.get(sqlite_name)
        if code is not None:
            # e.g. "UNIQUE constraint failed: users.email"
            detail = detail or str(orig)
            if not column and ":" in detail:
                column = detail.rsplit(":", 1)[-1].strip().rsplit(".", 1)[-1]

    return StorageDiagnostics(code=code, constraint=constraint, detail=detail, column=column)


def _unique_violation(diag: StorageDiagnostics) -> UserServiceError:
    if "email" in diag.detail or "email" in diag.constraint:
        return error_for(ErrorKind.DUPLICATE_EMAIL)
    if "id" in diag.detail or "pkey" in diag.constraint:
        return error_for(ErrorKind.DUPLICATE_ID)
    if "name" in diag.detail or "name" in diag.constraint:
        return error_for(ErrorKind.USER_ALREADY_EXISTS, "name already exists")
    return error_for(ErrorKind.USER_ALREADY_EXISTS)


def _not_null_violation(diag: StorageDiagnostics) -> UserServiceError:
    if "email" in diag.column:
        return error_for(ErrorKind.INVALID_INPUT, "email is required")
    if "name" in diag.column:
        return error_for(ErrorKind.INVALID_INPUT, "name is required")
    return error_for(ErrorKind.INVALID_INPUT, "required field is missing")


def translate_storage_error(error: SQLAlchemyError) -> UserServiceError | None:
    """Map a storage failure to a domain error.

    Args:
        error: Exception raised by SQLAlchemy.

    Returns:
        The matching domain error, or None when the failure is not
        recognized and should propagate unchanged.
    """
    if isinstance(error, NoResultFound):
        return error_for(ErrorKind.NOT_FOUND)

    if not isinstance(error, DBAPIError):
        return None

    diag = extract_diagnostics(error)

    if diag.code == PG_UNIQUE_VIOLATION:
        return _unique_violation(diag)
    if diag.code == PG_FOREIGN_KEY_VIOLATION:
        return error_for(ErrorKind.INVALID_INPUT, "foreign key constraint violation")
    if diag.code == PG_NOT_NULL_VIOLATION:
        return _not_null_violation(diag)
    if diag.code == PG_CHECK_VIOLATION:
        return error_for(ErrorKind.INVALID_INPUT, "check constraint violation")
    if diag.code in (PG_INVALID_TEXT_REPRESENTATION, PG_DATA_EXCEPTION):
        return error_for(ErrorKind.INVALID_INPUT, "invalid data format")

    logger.debug("Unclassified storage error (code=%s)", diag.code)
    return None
