# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Record create, update, upsert and delete recipes for Microsoft Dataverse.

The entry point is :class:`~dataverse_upsert.client.UpsertClient`. The
operations themselves only depend on a
:class:`~dataverse_upsert.store.base.RecordStore`, so they can run against
:class:`~dataverse_upsert.store.memory.InMemoryRecordStore` as well.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
