# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Shared constants for the upsert helpers."""

__all__ = []
