# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Equality query model shared by the record stores.

Stores only need exact-equality filters, an optional column projection and an
optional result limit, so :class:`RecordQuery` carries just that.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class RecordQuery:
    """
    Query for rows whose columns exactly equal the given values.

    :param table: Table logical name.
    :type table: str
    :param filters: Column name to required value. All conditions are ANDed.
    :type filters: dict[str, Any]
    :param select: Columns to return. ``None`` returns every column.
    :type select: list[str] | None
    :param top: Maximum number of rows to return.
    :type top: int | None

    Example::

        query = RecordQuery("account", filters={"name": "Contoso"}, select=["name"], top=1)
        rows = store.query(query)
    """

    table: str
    filters: Dict[str, Any] = field(default_factory=dict)
    select: Optional[List[str]] = None
    top: Optional[int] = None

    def __post_init__(self) -> None:
        if self.top is not None and self.top < 1:
            raise ValueError("top must be a positive integer")

    def matches(self, row: Mapping[str, Any]) -> bool:
        """Return True when ``row`` satisfies every equality filter (case-sensitive)."""
        for column, value in self.filters.items():
            if column not in row or row[column] != value:
                return False
        return True

    def build_filter(self, column_alias: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Build an OData ``$filter`` expression.

        :param column_alias: Optional mapping applied to column names before rendering,
            e.g. lookup columns to their ``_<column>_value`` form. Aliased columns hold
            GUIDs, which OData expects unquoted.
        :return: Filter string, or None when there are no filters.
        """
        alias = column_alias or {}
        clauses = []
        for column, value in self.filters.items():
            if column in alias and value is not None:
                clauses.append(f"{alias[column]} eq {value}")
            else:
                clauses.append(f"{column} eq {self._format_value(value)}")
        return " and ".join(clauses) if clauses else None

    @staticmethod
    def _format_value(value: Any) -> str:
        """
        Format a value for OData query syntax.

        :param value: Value to format.
        :return: OData-formatted value string.
        :rtype: str
        """
        if value is None:
            return "null"
        if isinstance(value, str):
            # Escape single quotes by doubling them
            escaped = value.replace("'", "''")
            return f"'{escaped}'"
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return str(value)


__all__ = ["RecordQuery"]
