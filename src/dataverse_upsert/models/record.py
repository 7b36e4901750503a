# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Record data model for Dataverse rows.

Provides a mutable representation of a row that may or may not have been
persisted yet, with dict-like access to its columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

# Type aliases for semantic clarity
RecordId = str  # UUID string
TableName = str  # e.g., "account", "opportunity"


@dataclass
class Record:
    """
    Row representation with metadata.

    ``id`` is ``None`` until a store assigns one on insert or upsert.

    :param table: Table logical name (e.g., "account").
    :type table: str
    :param data: Column values keyed by logical column name.
    :type data: dict[str, Any]
    :param id: Record GUID (primary key), or None when not yet persisted.
    :type id: str | None
    :param etag: Optional ETag returned by the server.
    :type etag: str | None

    Example::

        account = Record("account", {"name": "Contoso"})
        store.insert(account)
        print(account.id)
        print(account["name"])
    """

    table: TableName
    data: Dict[str, Any] = field(default_factory=dict)
    id: Optional[RecordId] = None
    etag: Optional[str] = None

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def keys(self):
        return self.data.keys()

    def values(self):
        return self.data.values()

    def items(self):
        return self.data.items()

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary of column values.

        :return: Copy of the column data, without id/table/etag.
        :rtype: dict[str, Any]
        """
        return dict(self.data)

    def to_full_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "table": self.table,
            "data": dict(self.data),
            "etag": self.etag,
        }

    @classmethod
    def from_api_response(
        cls,
        table: str,
        response_data: Dict[str, Any],
        *,
        id_field: Optional[str] = None,
    ) -> "Record":
        """
        Create a Record from a Dataverse Web API row.

        :param table: Table logical name.
        :type table: str
        :param response_data: Raw row dictionary.
        :type response_data: dict[str, Any]
        :param id_field: Primary id column. Defaults to ``<table>id``.
        :type id_field: str | None
        :return: Record instance.
        :rtype: Record
        """
        data = dict(response_data)
        pk = id_field or f"{table}id"
        record_id = data.pop(pk, None)
        etag = data.pop("@odata.etag", None)
        clean_data = {k: v for k, v in data.items() if "@" not in k}
        return cls(
            table=table,
            data=clean_data,
            id=str(record_id) if record_id else None,
            etag=etag,
        )


__all__ = ["Record", "RecordId", "TableName"]
