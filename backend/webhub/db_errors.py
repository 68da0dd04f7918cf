"""Helpers for classifying database/SQLAlchemy errors."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

_UNIQUE_VIOLATION_SQLSTATES = {"23505"}
_FOREIGN_KEY_VIOLATION_SQLSTATES = {"23503"}


def _sqlstate(orig: object) -> str | None:
    # psycopg exposes ``sqlstate``; the asyncpg adapter exposes ``pgcode``.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    """Return ``True`` if ``exc`` was raised by a unique/primary key constraint."""

    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    if _sqlstate(orig) in _UNIQUE_VIOLATION_SQLSTATES:
        return True

    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


def is_foreign_key_violation(exc: SQLAlchemyError) -> bool:
    """Return ``True`` if ``exc`` was raised by a foreign key constraint."""

    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    if _sqlstate(orig) in _FOREIGN_KEY_VIOLATION_SQLSTATES:
        return True

    return "foreign key constraint" in str(orig).lower()
