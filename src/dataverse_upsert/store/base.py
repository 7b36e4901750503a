# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Capability protocol every record store implements."""

from __future__ import annotations

from typing import List, Protocol, Sequence, Union, runtime_checkable

from ..core.errors import ValidationError
from ..core._error_codes import VALIDATION_RECORD_TYPE
from ..models.query import RecordQuery
from ..models.record import Record

RecordOrRecords = Union[Record, Sequence[Record]]


@runtime_checkable
class RecordStore(Protocol):
    """
    Injectable record store.

    Every write accepts a single :class:`Record` or a list of them and is
    all-or-nothing per call. ``insert`` and ``upsert`` assign generated ids
    back onto the records they create. Writes given an empty list do nothing.
    """

    def query(self, query: RecordQuery) -> List[Record]:
        ...

    def insert(self, records: RecordOrRecords) -> List[Record]:
        ...

    def update(self, records: RecordOrRecords) -> List[Record]:
        ...

    def upsert(self, records: RecordOrRecords) -> List[Record]:
        ...

    def delete(self, records: RecordOrRecords) -> None:
        ...


def _as_record_list(records: RecordOrRecords) -> List[Record]:
    """Normalize the single-or-list argument accepted by store writes."""
    if isinstance(records, Record):
        return [records]
    if isinstance(records, (list, tuple)):
        if not all(isinstance(r, Record) for r in records):
            raise ValidationError("All items must be Record instances", subcode=VALIDATION_RECORD_TYPE)
        return list(records)
    raise ValidationError("records must be a Record or a list of Record", subcode=VALIDATION_RECORD_TYPE)


__all__ = ["RecordStore", "RecordOrRecords"]
