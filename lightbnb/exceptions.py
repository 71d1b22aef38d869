"""
Custom exception classes for the data access layer.
Separates store failures by kind so callers can tell them apart from empty results.
"""

from typing import Optional
from sqlalchemy import exc as sa_exc
from asyncpg.exceptions._base import DataError as DriverDataError
import asyncio
import enum


class FailureKind(str, enum.Enum):
    """Kinds of store failure surfaced to callers."""
    CONSTRAINT_VIOLATION = "constraint_violation"
    CONNECTION_FAILURE = "connection_failure"
    MALFORMED_QUERY = "malformed_query"
    UNKNOWN = "unknown"


class DataAccessError(Exception):
    """Base data access exception."""

    kind: FailureKind = FailureKind.UNKNOWN

    def __init__(self, detail: str, kind: Optional[FailureKind] = None):
        super().__init__(detail)
        self.detail = detail
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"


class ConstraintViolationError(DataAccessError):
    """Unique key, foreign key or check constraint rejected by the store."""

    kind = FailureKind.CONSTRAINT_VIOLATION


class ConnectionFailureError(DataAccessError):
    """Store could not be reached, or no pooled connection became available."""

    kind = FailureKind.CONNECTION_FAILURE


class MalformedQueryError(DataAccessError):
    """Store rejected the statement or one of its bound values."""

    kind = FailureKind.MALFORMED_QUERY


def _error_detail(error: BaseException) -> str:
    # DBAPIError carries the driver exception in .orig
    orig = getattr(error, "orig", None)
    message = str(orig) if orig is not None else str(error)
    return message or error.__class__.__name__


def _error_chain(error: BaseException) -> list:
    """The error, the adapted DBAPI error in .orig and the driver error behind it."""
    chain = [error]
    orig = getattr(error, "orig", None)
    if orig is not None:
        chain.append(orig)
        if orig.__cause__ is not None:
            chain.append(orig.__cause__)
    return chain


def _sqlstate(chain: list) -> Optional[str]:
    for candidate in chain:
        code = getattr(candidate, "sqlstate", None)
        if code:
            return str(code)
    return None


# SQLSTATE class prefixes
SQLSTATE_KINDS = {
    "08": ConnectionFailureError,
    "22": MalformedQueryError,
    "23": ConstraintViolationError,
    "42": MalformedQueryError,
}


def translate_database_error(error: BaseException) -> DataAccessError:
    """
    Map a SQLAlchemy or driver exception to the data access taxonomy.

    Args:
        error: Exception raised while executing a statement

    Returns:
        DataAccessError subclass instance describing the failure
    """
    if isinstance(error, DataAccessError):
        return error

    detail = _error_detail(error)
    chain = _error_chain(error)

    # Bad bound values are reported by the driver as an InterfaceError subclass
    if any(isinstance(candidate, DriverDataError) for candidate in chain):
        return MalformedQueryError(detail)

    sqlstate = _sqlstate(chain)
    if sqlstate and sqlstate[:2] in SQLSTATE_KINDS:
        return SQLSTATE_KINDS[sqlstate[:2]](detail)

    if isinstance(error, sa_exc.IntegrityError):
        return ConstraintViolationError(detail)
    if isinstance(error, (sa_exc.ProgrammingError, sa_exc.DataError)):
        return MalformedQueryError(detail)
    if isinstance(
        error,
        (
            sa_exc.OperationalError,
            sa_exc.InterfaceError,
            sa_exc.DisconnectionError,
            sa_exc.TimeoutError,
            asyncio.TimeoutError,
            OSError,
        ),
    ):
        return ConnectionFailureError(detail)

    return DataAccessError(detail, FailureKind.UNKNOWN)
