"""
User repository for account lookup and registration.
"""

from lightbnb.repositories.base import BaseRepository
from lightbnb.database import Row
from lightbnb.schemas import UserCreate
from typing import Any, Dict, Optional, Union
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    """Repository for the users table."""

    async def get_by_email(self, email: str) -> Optional[Row]:
        """
        Get a single user by exact email match.

        Args:
            email: Email address to search for

        Returns:
            User row if found, None otherwise
        """
        user = await self._fetch_one(
            "SELECT * FROM users WHERE email = $1;",
            [email],
            action=f"get user by email {email}",
        )
        if user is None:
            logger.debug(f"User with email {email} not found")
        return user

    async def get_by_id(self, user_id: Union[int, str]) -> Optional[Row]:
        """
        Get a single user by id.

        Args:
            user_id: Id of the user, as an int or a numeric string

        Returns:
            User row if found, None otherwise

        Raises:
            ValueError: If user_id is not an integer or a string of digits
        """
        user_id = self._check_id(user_id, "user_id")
        user = await self._fetch_one(
            "SELECT * FROM users WHERE id = $1;",
            [user_id],
            action=f"get user by id {user_id}",
        )
        if user is None:
            logger.debug(f"User with id {user_id} not found")
        return user

    async def create_user(self, user: Union[UserCreate, Dict[str, Any]]) -> Row:
        """
        Insert a new user. The store assigns the id.

        Args:
            user: UserCreate or mapping with name, email and password

        Returns:
            Inserted user row including its id

        Raises:
            pydantic.ValidationError: If the user data is incomplete or invalid
            ConstraintViolationError: If the email is already registered
            DataAccessError: If the store operation fails otherwise
        """
        if not isinstance(user, UserCreate):
            user = UserCreate.model_validate(user)

        created = await self._fetch_one(
            """
            INSERT INTO users (name, email, password)
            VALUES ($1, $2, $3)
            RETURNING *;
            """,
            [user.name, user.email, user.password],
            action=f"create user {user.email}",
        )
        logger.info(f"Created user: {user.email} (ID: {created['id']})")
        return created
