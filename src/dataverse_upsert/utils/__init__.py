# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal helpers."""

__all__ = []
