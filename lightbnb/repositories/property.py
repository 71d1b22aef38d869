"""
Property repository for listing search and property creation.
Search filters are composed with FilteredQueryBuilder so every value stays a bound parameter.
"""

from lightbnb.repositories.base import BaseRepository
from lightbnb.database import Row
from lightbnb.query_builder import FilteredQueryBuilder
from lightbnb.schemas import PropertyCreate, PropertySearchOptions
from typing import Any, Dict, List, Optional, Tuple, Union
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)

CENTS_PER_UNIT = 100

# Inner join: properties without any review never appear in search results
PROPERTY_SEARCH_SQL = """
SELECT properties.*, avg(property_reviews.rating) AS average_rating
FROM properties
JOIN property_reviews ON property_reviews.property_id = properties.id
"""


def to_cents(amount: Decimal) -> int:
    """Convert a whole-unit price to integer cents."""
    return int(amount * CENTS_PER_UNIT)


class PropertyRepository(BaseRepository):
    """Repository for the properties table."""

    def build_search_query(
        self,
        filters: PropertySearchOptions,
        limit: int = 10,
    ) -> Tuple[str, List[Any]]:
        """
        Build the search statement for the given filters.

        Args:
            filters: PropertySearchOptions instance
            limit: Maximum number of properties to return

        Returns:
            Tuple of (sql text, positional values)
        """
        builder = FilteredQueryBuilder(PROPERTY_SEARCH_SQL)

        if filters.city:
            builder.where("properties.city LIKE {}", filters.city)

        if filters.minimum_price_per_night:
            builder.where("properties.cost_per_night > {}", to_cents(filters.minimum_price_per_night))
        if filters.maximum_price_per_night:
            builder.where("properties.cost_per_night < {}", to_cents(filters.maximum_price_per_night))

        builder.group_by("properties.id")

        if filters.minimum_rating:
            builder.having("avg(property_reviews.rating) >= {}", filters.minimum_rating)

        builder.order_by("properties.cost_per_night").limit(limit)
        return builder.build()

    async def search_properties(
        self,
        filters: Optional[Union[PropertySearchOptions, Dict[str, Any]]] = None,
        limit: int = 10,
    ) -> List[Row]:
        """
        Search reviewed properties, cheapest first.

        Args:
            filters: PropertySearchOptions or mapping of the same keys, None for no filters
            limit: Maximum number of properties to return

        Returns:
            List of property rows, each with average_rating
        """
        limit = self._check_limit(limit)
        if filters is None:
            filters = PropertySearchOptions()
        elif not isinstance(filters, PropertySearchOptions):
            filters = PropertySearchOptions.model_validate(filters)

        sql, params = self.build_search_query(filters, limit)
        properties = await self._fetch_all(sql, params, action="search properties")
        logger.debug(f"Property search returned {len(properties)} results")
        return properties

    async def create_property(self, property_data: Union[PropertyCreate, Dict[str, Any]]) -> Row:
        """
        Insert a new property with all fourteen listing fields.

        Args:
            property_data: PropertyCreate or mapping with every property field

        Returns:
            Inserted property row including its id

        Raises:
            pydantic.ValidationError: If a field is missing or invalid
            ConstraintViolationError: If owner_id does not reference a user
            DataAccessError: If the store operation fails otherwise
        """
        if not isinstance(property_data, PropertyCreate):
            property_data = PropertyCreate.model_validate(property_data)

        columns = PropertyCreate.column_names()
        placeholders = ", ".join(f"${position}" for position in range(1, len(columns) + 1))
        sql = (
            f"INSERT INTO properties ({', '.join(columns)})\n"
            f"VALUES ({placeholders})\n"
            "RETURNING *;"
        )

        created = await self._fetch_one(
            sql,
            property_data.column_values(),
            action=f"create property {property_data.title}",
        )
        logger.info(f"Created property: {created['title']} (ID: {created['id']})")
        return created
