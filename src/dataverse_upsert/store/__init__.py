# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Record stores used by the upsert helpers.

- :class:`~dataverse_upsert.store.base.RecordStore`: capability protocol (query, insert, update, upsert, delete).
- :class:`~dataverse_upsert.store.memory.InMemoryRecordStore`: in-process fake.
- :class:`~dataverse_upsert.store.dataverse.DataverseRecordStore`: Dataverse Web API implementation.
"""

from .base import RecordStore
from .memory import InMemoryRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore"]
