# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Record upsert operations.

- :mod:`~dataverse_upsert.operations.parents`: find-or-create a parent by name
- :mod:`~dataverse_upsert.operations.dependents`: build dependents deduplicated by name
- :mod:`~dataverse_upsert.operations.linking`: link dependents to parents named by one of their columns
- :mod:`~dataverse_upsert.operations.recipes`: standalone tutorial recipes
"""

__all__ = []
