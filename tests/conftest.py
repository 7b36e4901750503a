# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for the upsert helper tests.
"""

import datetime as _dt

import pytest

from dataverse_upsert.core.config import UpsertConfig
from dataverse_upsert.store.memory import InMemoryRecordStore


@pytest.fixture
def memory_store():
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def test_config():
    """Configuration with defaults that are easy to assert on."""
    return UpsertConfig(
        created_marker="New",
        updated_marker="Updated",
        default_stage="Prospecting",
        default_amount=500.0,
        close_date_months=1,
        http_timeout=5,
    )


@pytest.fixture
def today():
    """Fixed reference date for close-date calculations."""
    return _dt.date(2026, 1, 31)


@pytest.fixture
def sample_base_url():
    """Standard test base URL."""
    return "https://org.example.com"


@pytest.fixture
def sample_guid():
    """Sample GUID for testing."""
    return "11111111-2222-3333-4444-555555555555"
