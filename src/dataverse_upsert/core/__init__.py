# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the upsert helpers.

This module contains the foundational components including authentication,
configuration, HTTP client, and error handling.
"""

from .config import UpsertConfig
from .errors import (
    RecordStoreError,
    HttpError,
    ValidationError,
    MetadataError,
    RecordNotFoundError,
)

__all__ = [
    "UpsertConfig",
    "RecordStoreError",
    "HttpError",
    "ValidationError",
    "MetadataError",
    "RecordNotFoundError",
]
