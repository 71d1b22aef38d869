"""
Small builder for filtered SELECT statements with positional parameters.
Collects (fragment, value) pairs and numbers the $n placeholders only when rendering.
"""

from typing import Any, List, Optional, Tuple

PLACEHOLDER = "{}"


class FilteredQueryBuilder:
    """
    Accumulates WHERE and HAVING conditions for a base SELECT.

    Each fragment marks where its value goes with a single "{}", e.g.
    "properties.cost_per_night > {}". Values never enter the SQL text; they
    are returned alongside it, in placeholder order.
    """

    def __init__(self, base_sql: str):
        self.base_sql = base_sql.strip()
        self._where: List[Tuple[str, Any]] = []
        self._having: List[Tuple[str, Any]] = []
        self._group_by: Optional[str] = None
        self._order_by: Optional[str] = None
        self._limit: Optional[Any] = None

    @staticmethod
    def _check_fragment(fragment: str) -> str:
        if fragment.count(PLACEHOLDER) != 1:
            raise ValueError(f"Fragment must contain exactly one '{PLACEHOLDER}' marker: {fragment!r}")
        return fragment

    def where(self, fragment: str, value: Any) -> "FilteredQueryBuilder":
        self._where.append((self._check_fragment(fragment), value))
        return self

    def having(self, fragment: str, value: Any) -> "FilteredQueryBuilder":
        self._having.append((self._check_fragment(fragment), value))
        return self

    def group_by(self, clause: str) -> "FilteredQueryBuilder":
        self._group_by = clause
        return self

    def order_by(self, clause: str) -> "FilteredQueryBuilder":
        self._order_by = clause
        return self

    def limit(self, value: Any) -> "FilteredQueryBuilder":
        self._limit = value
        return self

    @property
    def params(self) -> List[Any]:
        """Bound values in the order build() numbers them."""
        values = [value for _, value in self._where]
        values.extend(value for _, value in self._having)
        if self._limit is not None:
            values.append(self._limit)
        return values

    def build(self) -> Tuple[str, List[Any]]:
        """
        Render the statement.

        Returns:
            Tuple of (sql text with $1..$n placeholders, list of n values)
        """
        params: List[Any] = []

        def bind(fragment: str, value: Any) -> str:
            params.append(value)
            return fragment.replace(PLACEHOLDER, f"${len(params)}")

        parts = [self.base_sql]

        if self._where:
            conditions = [bind(fragment, value) for fragment, value in self._where]
            parts.append("WHERE " + " AND ".join(conditions))

        if self._group_by:
            parts.append(f"GROUP BY {self._group_by}")

        if self._having:
            conditions = [bind(fragment, value) for fragment, value in self._having]
            parts.append("HAVING " + " AND ".join(conditions))

        if self._order_by:
            parts.append(f"ORDER BY {self._order_by}")

        if self._limit is not None:
            parts.append(bind("LIMIT {}", self._limit))

        return "\n".join(parts) + ";", params
