"""
LightBnB data access layer.
Parameterized PostgreSQL queries for users, properties and reservations.
"""

from lightbnb.config import Settings, configure_logging, get_settings
from lightbnb.data_access import DataAccess
from lightbnb.database import Database, QueryExecutor
from lightbnb.exceptions import (
    ConnectionFailureError,
    ConstraintViolationError,
    DataAccessError,
    FailureKind,
    MalformedQueryError,
)

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
    "DataAccess",
    "Database",
    "QueryExecutor",
    "ConnectionFailureError",
    "ConstraintViolationError",
    "DataAccessError",
    "FailureKind",
    "MalformedQueryError",
]
