"""
Base repository class with common query helpers over a positional-parameter executor.
Provides row fetching, limit checking and failure logging shared by the concrete repositories.
"""

from lightbnb.database import QueryExecutor, Row
from lightbnb.exceptions import DataAccessError
from typing import Any, List, Optional, Sequence, Union
import logging

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base repository class providing shared execution helpers.
    Store failures are logged and re-raised; an empty result is never an error.
    """

    def __init__(self, executor: QueryExecutor):
        """
        Initialize repository with a query executor.

        Args:
            executor: Object running SQL with $n placeholders, usually a Database
        """
        self.executor = executor

    async def _fetch_all(self, sql: str, params: Sequence[Any], action: str) -> List[Row]:
        """
        Run a statement and return every row.

        Args:
            sql: Statement text
            params: Positional values for the placeholders
            action: Short description used in log messages

        Returns:
            List of rows, possibly empty

        Raises:
            DataAccessError: If the store operation fails
        """
        try:
            rows = await self.executor.execute(sql, list(params))
        except DataAccessError as e:
            logger.error(f"Failed to {action}: {e}")
            raise
        logger.debug(f"{action} returned {len(rows)} rows")
        return rows

    async def _fetch_one(self, sql: str, params: Sequence[Any], action: str) -> Optional[Row]:
        """Run a statement and return its first row, or None if no row matched."""
        rows = await self._fetch_all(sql, params, action)
        return rows[0] if rows else None

    @staticmethod
    def _check_limit(limit: Any) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        return limit

    @staticmethod
    def _check_id(value: Union[int, str], name: str = "id") -> int:
        # Route params arrive as strings
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdecimal():
            return int(value.strip())
        raise ValueError(f"{name} must be an integer, got {value!r}")
