# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""In-process record store used by tests and offline walkthroughs."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import RecordNotFoundError, ValidationError
from ..core._error_codes import (
    RECORD_NOT_FOUND,
    VALIDATION_DUPLICATE_ID,
    VALIDATION_RECORD_ID_MISSING,
    VALIDATION_RECORD_ID_PRESENT,
)
from ..models.query import RecordQuery
from ..models.record import Record
from .base import RecordOrRecords, _as_record_list

_logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """
    Dictionary-backed :class:`~dataverse_upsert.store.base.RecordStore`.

    Rows are kept per table in insertion order, so queries return the oldest
    match first. Every write validates the whole batch before touching any row.
    Each write call (including empty ones) is appended to ``write_calls`` as
    ``(operation, record_count)`` and each query to ``queries``.

    Example::

        store = InMemoryRecordStore()
        store.seed("account", {"name": "Contoso"})
        store.query(RecordQuery("account", filters={"name": "Contoso"}, top=1))
    """

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.write_calls: List[Tuple[str, int]] = []
        self.queries: List[RecordQuery] = []

    # ------------------------------------------------------------- helpers

    def seed(self, table: str, data: Dict[str, Any], *, record_id: Optional[str] = None) -> Record:
        """Add a row without recording a write call."""
        rid = record_id or str(uuid.uuid4())
        self._tables.setdefault(table, {})[rid] = dict(data)
        return Record(table=table, data=dict(data), id=rid)

    def rows(self, table: str) -> List[Record]:
        """Return every row of ``table`` in insertion order."""
        return [Record(table=table, data=dict(d), id=rid) for rid, d in self._tables.get(table, {}).items()]

    def count_writes(self, operation: Optional[str] = None) -> int:
        if operation is None:
            return len(self.write_calls)
        return sum(1 for op, _ in self.write_calls if op == operation)

    def _exists(self, record: Record) -> bool:
        return record.id in self._tables.get(record.table, {})

    def _require_ids(self, records: List[Record], operation: str) -> None:
        seen = set()
        for r in records:
            if not r.id:
                raise ValidationError(f"{operation} requires record ids", subcode=VALIDATION_RECORD_ID_MISSING)
            if not self._exists(r):
                raise RecordNotFoundError(
                    f"{r.table} record {r.id} does not exist",
                    subcode=RECORD_NOT_FOUND,
                    details={"table": r.table, "id": r.id},
                )
            key = (r.table, r.id)
            if key in seen:
                raise ValidationError(f"Duplicate id {r.id} in {operation} batch", subcode=VALIDATION_DUPLICATE_ID)
            seen.add(key)

    @staticmethod
    def _require_distinct(records: List[Record], operation: str) -> None:
        seen = set()
        for r in records:
            if id(r) in seen:
                raise ValidationError(
                    f"The same {r.table} record appears twice in {operation} batch",
                    subcode=VALIDATION_DUPLICATE_ID,
                )
            seen.add(id(r))

    def _add(self, record: Record) -> None:
        record.id = str(uuid.uuid4())
        self._tables.setdefault(record.table, {})[record.id] = dict(record.data)

    def _merge(self, record: Record) -> None:
        self._tables[record.table][record.id].update(record.data)

    # --------------------------------------------------------------- store

    def query(self, query: RecordQuery) -> List[Record]:
        self.queries.append(query)
        out: List[Record] = []
        for rid, row in self._tables.get(query.table, {}).items():
            if not query.matches(row):
                continue
            if query.select is not None:
                data = {c: row[c] for c in query.select if c in row}
            else:
                data = dict(row)
            out.append(Record(table=query.table, data=data, id=rid))
            if query.top is not None and len(out) >= query.top:
                break
        return out

    def insert(self, records: RecordOrRecords) -> List[Record]:
        batch = _as_record_list(records)
        self.write_calls.append(("insert", len(batch)))
        self._require_distinct(batch, "insert")
        for r in batch:
            if r.id:
                raise ValidationError(
                    f"Cannot insert {r.table} record that already has id {r.id}",
                    subcode=VALIDATION_RECORD_ID_PRESENT,
                )
        for r in batch:
            self._add(r)
        _logger.debug("insert %d record(s)", len(batch))
        return batch

    def update(self, records: RecordOrRecords) -> List[Record]:
        batch = _as_record_list(records)
        self.write_calls.append(("update", len(batch)))
        self._require_ids(batch, "update")
        for r in batch:
            self._merge(r)
        _logger.debug("update %d record(s)", len(batch))
        return batch

    def upsert(self, records: RecordOrRecords) -> List[Record]:
        batch = _as_record_list(records)
        self.write_calls.append(("upsert", len(batch)))
        self._require_distinct(batch, "upsert")
        self._require_ids([r for r in batch if r.id], "upsert")
        for r in batch:
            if r.id:
                self._merge(r)
            else:
                self._add(r)
        _logger.debug("upsert %d record(s)", len(batch))
        return batch

    def delete(self, records: RecordOrRecords) -> None:
        batch = _as_record_list(records)
        self.write_calls.append(("delete", len(batch)))
        self._require_ids(batch, "delete")
        for r in batch:
            del self._tables[r.table][r.id]
        _logger.debug("delete %d record(s)", len(batch))


__all__ = ["InMemoryRecordStore"]
