# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the upsert helpers.

- :class:`~dataverse_upsert.models.record.Record`: Record representation with dict-like access.
- :class:`~dataverse_upsert.models.query.RecordQuery`: Equality query with optional limit.
- :class:`~dataverse_upsert.models.decision.ParentDecision`: Outcome of parent resolution.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
