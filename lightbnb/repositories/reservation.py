"""
Reservation repository for a guest's booking history.
"""

from lightbnb.repositories.base import BaseRepository
from lightbnb.database import Row
from typing import List, Union
import logging

logger = logging.getLogger(__name__)

# "Past" is decided by the store's clock when the statement runs
PAST_RESERVATIONS_SQL = """
SELECT properties.*, reservations.*, avg(property_reviews.rating) AS average_rating
FROM reservations
JOIN properties ON reservations.property_id = properties.id
JOIN property_reviews ON properties.id = property_reviews.property_id
WHERE reservations.guest_id = $1
AND reservations.end_date < now()::date
GROUP BY properties.id, reservations.id
ORDER BY reservations.start_date
LIMIT $2;
"""


class ReservationRepository(BaseRepository):
    """Repository for the reservations table."""

    async def get_past_reservations_for_guest(self, guest_id: Union[int, str], limit: int = 10) -> List[Row]:
        """
        Get a guest's finished reservations, oldest first.

        Each row carries the property's columns, the reservation's columns
        (whose id wins over the property's) and the property's average_rating.

        Args:
            guest_id: Id of the guest user, as an int or a numeric string
            limit: Maximum number of reservations to return

        Returns:
            List of merged reservation rows

        Raises:
            ValueError: If guest_id or limit is not a valid integer
        """
        guest_id = self._check_id(guest_id, "guest_id")
        limit = self._check_limit(limit)
        reservations = await self._fetch_all(
            PAST_RESERVATIONS_SQL,
            [guest_id, limit],
            action=f"get reservations for guest {guest_id}",
        )
        logger.debug(f"Retrieved {len(reservations)} past reservations for guest {guest_id}")
        return reservations
