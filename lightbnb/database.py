"""
Database connection and query execution for PostgreSQL.
Wraps an async SQLAlchemy engine and its connection pool behind an explicitly owned store handle.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.exc import SQLAlchemyError
from lightbnb.config import Settings, get_settings, to_async_url
from lightbnb.exceptions import ConnectionFailureError, translate_database_error
from typing import Any, Dict, List, Optional, Protocol, Sequence
import asyncio
import logging

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class QueryExecutor(Protocol):
    """Anything that can run one positional-parameter statement and return its rows."""

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        ...


class Database:
    """
    Store handle owning the engine and its connection pool.
    Open it at process start with connect() and close it at shutdown, or use it
    as an async context manager.
    """

    def __init__(self, settings: Optional[Settings] = None, database_url: Optional[str] = None):
        """
        Initialize the handle without touching the network.

        Args:
            settings: Settings instance, defaults to the cached settings
            database_url: Overrides settings.database_url when given
        """
        self.settings = settings or get_settings()
        self.database_url = to_async_url(database_url) or self.settings.database_url
        self._engine: Optional[AsyncEngine] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise ConnectionFailureError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self.database_url,
            echo=self.settings.debug,
            pool_size=self.settings.pool_size,
            max_overflow=self.settings.max_overflow,
            pool_timeout=self.settings.pool_timeout,
            pool_recycle=self.settings.pool_recycle,
            pool_pre_ping=self.settings.pool_pre_ping,
            connect_args={
                "server_settings": {
                    "application_name": "lightbnb",
                }
            },
        )

    async def connect(self) -> "Database":
        """
        Create the engine and verify connectivity.

        Raises:
            ConnectionFailureError: If the database cannot be reached
        """
        if self._engine is not None:
            return self

        self._engine = self._create_engine()
        try:
            await self.execute("SELECT 1")
        except ConnectionFailureError:
            await self.close()
            raise
        logger.info("You are connected to the database.")
        return self

    async def close(self) -> None:
        """Dispose the engine and every pooled connection."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        logger.info("Database connections closed")

    async def __aenter__(self) -> "Database":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        """
        Execute one statement with positionally bound ($1, $2, ...) parameters.
        The statement runs in its own transaction on a pooled connection.

        Args:
            sql: Statement text with $n placeholders
            params: Values for the placeholders, in order

        Returns:
            List of rows as dictionaries, empty for statements without rows

        Raises:
            DataAccessError: Subclass matching the kind of store failure
        """
        engine = self.engine
        try:
            async with engine.begin() as conn:
                result = await conn.exec_driver_sql(sql, tuple(params))
                if not result.returns_rows:
                    return []
                columns = list(result.keys())
                # Later columns win on duplicate names, as in "SELECT a.*, b.*"
                return [dict(zip(columns, row)) for row in result.fetchall()]
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            raise translate_database_error(e) from e

    async def test_connection(self) -> bool:
        """
        Test database connectivity.
        Returns True if connection is successful, False otherwise.
        """
        try:
            await self.execute("SELECT 1")
            logger.info("Database connection successful")
            return True
        except ConnectionFailureError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def pool_status(self) -> Dict[str, Any]:
        """Get connection pool information for monitoring."""
        pool = self.engine.pool
        return {
            "pool_size": pool.size(),
            "checked_in_connections": pool.checkedin(),
            "checked_out_connections": pool.checkedout(),
            "overflow_connections": pool.overflow(),
        }
