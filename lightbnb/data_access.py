"""
Data access facade used by the web layer.
Bundles the user, reservation and property repositories over one executor.
"""

from lightbnb.config import Settings, get_settings
from lightbnb.database import QueryExecutor, Row
from lightbnb.repositories import PropertyRepository, ReservationRepository, UserRepository
from lightbnb.schemas import PropertyCreate, PropertySearchOptions, UserCreate
from typing import Any, Dict, List, Optional, Union


class DataAccess:
    """
    The six operations the web layer calls.

    None or an empty list means nothing matched. Store failures raise a
    DataAccessError subclass whose kind says what went wrong.
    """

    def __init__(self, executor: QueryExecutor, settings: Optional[Settings] = None):
        self.executor = executor
        self.settings = settings or get_settings()
        self.users = UserRepository(executor)
        self.reservations = ReservationRepository(executor)
        self.properties = PropertyRepository(executor)

    def _limit(self, limit: Optional[int]) -> int:
        return self.settings.default_result_limit if limit is None else limit

    # Users

    async def get_user_by_email(self, email: str) -> Optional[Row]:
        return await self.users.get_by_email(email)

    async def get_user_by_id(self, user_id: Union[int, str]) -> Optional[Row]:
        return await self.users.get_by_id(user_id)

    async def add_user(self, user: Union[UserCreate, Dict[str, Any]]) -> Row:
        return await self.users.create_user(user)

    # Reservations

    async def get_reservations_for_guest(self, guest_id: Union[int, str], limit: Optional[int] = None) -> List[Row]:
        return await self.reservations.get_past_reservations_for_guest(guest_id, self._limit(limit))

    # Properties

    async def get_filtered_properties(
        self,
        options: Optional[Union[PropertySearchOptions, Dict[str, Any]]] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        return await self.properties.search_properties(options, self._limit(limit))

    async def add_property(self, property_data: Union[PropertyCreate, Dict[str, Any]]) -> Row:
        return await self.properties.create_property(property_data)
