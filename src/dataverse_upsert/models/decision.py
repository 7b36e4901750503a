# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Parent resolution outcome."""

from __future__ import annotations

from dataclasses import dataclass

from .record import Record

INSERT = "insert"
UPDATE = "update"


@dataclass(frozen=True)
class ParentDecision:
    """
    What the parent resolver decided to write.

    :param action: ``"insert"`` for a new parent or ``"update"`` for a matched one.
    :type action: str
    :param record: The record to write. Carries an id only for ``"update"``.
    :type record: ~dataverse_upsert.models.record.Record
    """

    action: str
    record: Record

    def __post_init__(self) -> None:
        if self.action not in (INSERT, UPDATE):
            raise ValueError(f"Unknown parent action: {self.action!r}")

    @property
    def creates(self) -> bool:
        return self.action == INSERT


__all__ = ["ParentDecision", "INSERT", "UPDATE"]
