"""
Test configuration and fixtures for the LightBnB data access layer.
Provides a recording fake executor, a PostgreSQL-backed database fixture and test data factories.
"""

import asyncpg
import pytest
import os
from datetime import date, timedelta
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence
from sqlalchemy import exc as sa_exc
from sqlalchemy.dialects.postgresql.asyncpg import AsyncAdapt_asyncpg_dbapi

from lightbnb.config import Settings
from lightbnb.data_access import DataAccess
from lightbnb.database import Database
from lightbnb.repositories import PropertyRepository, ReservationRepository, UserRepository


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

SCHEMA_STATEMENTS = [
    "DROP TABLE IF EXISTS property_reviews, reservations, properties, users CASCADE",
    """
    CREATE TABLE users (
      id SERIAL PRIMARY KEY NOT NULL,
      name VARCHAR(255) NOT NULL,
      email VARCHAR(255) NOT NULL UNIQUE,
      password VARCHAR(255) NOT NULL
    )
    """,
    """
    CREATE TABLE properties (
      id SERIAL PRIMARY KEY NOT NULL,
      owner_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
      title VARCHAR(255) NOT NULL,
      description TEXT,
      thumbnail_photo_url VARCHAR(255) NOT NULL,
      cover_photo_url VARCHAR(255) NOT NULL,
      cost_per_night INTEGER NOT NULL DEFAULT 0,
      parking_spaces INTEGER NOT NULL DEFAULT 0,
      number_of_bathrooms INTEGER NOT NULL DEFAULT 0,
      number_of_bedrooms INTEGER NOT NULL DEFAULT 0,
      country VARCHAR(255) NOT NULL,
      street VARCHAR(255) NOT NULL,
      city VARCHAR(255) NOT NULL,
      province VARCHAR(255) NOT NULL,
      post_code VARCHAR(255) NOT NULL
    )
    """,
    """
    CREATE TABLE reservations (
      id SERIAL PRIMARY KEY NOT NULL,
      start_date DATE NOT NULL,
      end_date DATE NOT NULL,
      property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
      guest_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE property_reviews (
      id SERIAL PRIMARY KEY NOT NULL,
      guest_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
      property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
      rating SMALLINT NOT NULL DEFAULT 0,
      message TEXT
    )
    """,
]


class RecordingExecutor:
    """
    In-memory executor that records every statement.
    Responses are queued per call; with nothing queued a call returns no rows.
    """

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self._responses: List[Dict[str, Any]] = []

    def queue(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[BaseException] = None):
        self._responses.append({"rows": rows or [], "error": error})
        return self

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append({"sql": sql, "params": list(params)})
        if not self._responses:
            return []
        response = self._responses.pop(0)
        if response["error"] is not None:
            raise response["error"]
        return response["rows"]

    @property
    def last_sql(self) -> str:
        return self.calls[-1]["sql"]

    @property
    def last_params(self) -> List[Any]:
        return self.calls[-1]["params"]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, environment="testing")


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def user_repository(executor: RecordingExecutor) -> UserRepository:
    return UserRepository(executor)


@pytest.fixture
def reservation_repository(executor: RecordingExecutor) -> ReservationRepository:
    return ReservationRepository(executor)


@pytest.fixture
def property_repository(executor: RecordingExecutor) -> PropertyRepository:
    return PropertyRepository(executor)


@pytest.fixture
def data_access(executor: RecordingExecutor, settings: Settings) -> DataAccess:
    return DataAccess(executor, settings)


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Connected database with a fresh schema. Skipped without TEST_DATABASE_URL."""
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL is not set")

    db = Database(settings.model_copy(update={"pool_size": 5}), database_url=TEST_DATABASE_URL)

    await db.connect()
    for statement in SCHEMA_STATEMENTS:
        await db.execute(statement)
    try:
        yield db
    finally:
        await db.execute(SCHEMA_STATEMENTS[0])
        await db.close()


@pytest.fixture
def db_access(database: Database, settings: Settings) -> DataAccess:
    return DataAccess(database, settings)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    _counter = 0

    @classmethod
    def create_user_data(
        cls,
        name: str = "Test User",
        email: Optional[str] = None,
        password: str = "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u.",
    ) -> dict:
        """Create user data dictionary."""
        cls._counter += 1
        return {
            "name": name,
            "email": email or f"user{cls._counter}@example.com",
            "password": password,
        }

    @staticmethod
    def create_user_row(user_id: int = 1, **overrides) -> dict:
        """Create a row as the users table would return it."""
        data = UserFactory.create_user_data(**overrides)
        return {"id": user_id, **data}


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: int = 1,
        title: str = "Speed lamp",
        cost_per_night: int = 93061,
        city: str = "Vancouver",
        **overrides
    ) -> dict:
        """Create property data dictionary with all fourteen fields."""
        data = {
            "owner_id": owner_id,
            "title": title,
            "description": "description",
            "thumbnail_photo_url": "https://images.example.com/thumb.jpg",
            "cover_photo_url": "https://images.example.com/cover.jpg",
            "cost_per_night": cost_per_night,
            "street": "536 Namsub Highway",
            "city": city,
            "province": "British Columbia",
            "post_code": "V6B 1A1",
            "country": "Canada",
            "parking_spaces": 6,
            "number_of_bathrooms": 4,
            "number_of_bedrooms": 8,
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_property_row(property_id: int = 1, average_rating=None, **overrides) -> dict:
        """Create a row as a property search would return it."""
        row = {"id": property_id, **PropertyFactory.create_property_data(**overrides)}
        if average_rating is not None:
            row["average_rating"] = average_rating
        return row


async def seed_review(db: Database, property_id: int, rating: int, guest_id: Optional[int] = None) -> None:
    await db.execute(
        "INSERT INTO property_reviews (guest_id, property_id, rating) VALUES ($1, $2, $3);",
        [guest_id, property_id, rating],
    )


async def seed_reservation(db: Database, property_id: int, guest_id: int, start: date, end: date) -> dict:
    rows = await db.execute(
        "INSERT INTO reservations (start_date, end_date, property_id, guest_id) "
        "VALUES ($1, $2, $3, $4) RETURNING *;",
        [start, end, property_id, guest_id],
    )
    return rows[0]


async def store_today(db: Database) -> date:
    """The store decides what "past" means, so fixtures are dated from its clock."""
    rows = await db.execute("SELECT now()::date AS today;")
    return rows[0]["today"]


def shift(day: date, days: int) -> date:
    return day + timedelta(days=days)


def asyncpg_dbapi_error(driver_error: Exception, statement: str = "SELECT * FROM users WHERE id = $1") -> sa_exc.DBAPIError:
    """
    Wrap an asyncpg exception the way SQLAlchemy's asyncpg dialect does at execute time:
    driver error -> adapted DBAPI error (sqlstate copied, driver error as __cause__) -> DBAPIError.
    """
    dbapi = AsyncAdapt_asyncpg_dbapi(asyncpg)
    mapping = dbapi._asyncpg_error_translate
    adapted_cls = next(cls for cls in type(driver_error).__mro__ if cls in mapping)
    adapted = mapping[adapted_cls](f"{type(driver_error)}: {driver_error}")
    adapted.pgcode = adapted.sqlstate = getattr(driver_error, "sqlstate", None)
    adapted.__cause__ = driver_error
    return sa_exc.DBAPIError.instance(statement, (), adapted, dbapi.Error)
