# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import logging
import unittest
from unittest.mock import MagicMock, patch

from azure.core.credentials import TokenCredential

from dataverse_upsert.client import UpsertClient
from dataverse_upsert.core.config import UpsertConfig
from dataverse_upsert.operations.recipes import RecordRecipes
from dataverse_upsert.store.dataverse import DataverseRecordStore


class TestUpsertClient(unittest.TestCase):
    """Unit tests for the UpsertClient entry point."""

    def setUp(self):
        self.mock_credential = MagicMock(spec=TokenCredential)
        self.client = UpsertClient("https://example.crm.dynamics.com/", self.mock_credential)

    def test_base_url_trimmed(self):
        self.assertEqual(self.client.store.base_url, "https://example.crm.dynamics.com")
        self.assertEqual(self.client.store.api, "https://example.crm.dynamics.com/api/data/v9.2")

    def test_empty_base_url_rejected(self):
        with self.assertRaises(ValueError):
            UpsertClient("", self.mock_credential)

    def test_non_credential_rejected(self):
        with self.assertRaises(TypeError):
            UpsertClient("https://example.crm.dynamics.com", object())

    def test_store_and_recipes_lazy_and_cached(self):
        self.assertIsNone(self.client._store)
        store = self.client.store
        self.assertIsInstance(store, DataverseRecordStore)
        self.assertIs(self.client.store, store)
        self.assertIsInstance(self.client.recipes, RecordRecipes)
        self.assertIs(self.client.recipes, self.client.recipes)

    def test_context_manager_owns_session(self):
        with patch("dataverse_upsert.client.requests.Session") as session_cls:
            with UpsertClient("https://example.crm.dynamics.com", self.mock_credential) as client:
                self.assertIs(client.store._http._session, session_cls.return_value)
            session_cls.return_value.close.assert_called_once()
            self.assertIsNone(client._session)
            self.assertIsNone(client._store)

    def test_close_is_idempotent(self):
        _ = self.client.store
        self.client.close()
        self.client.close()
        self.assertIsNone(self.client._store)

    def test_enable_logging_sets_package_level(self):
        logger = logging.getLogger("dataverse_upsert")
        previous = logger.level
        try:
            UpsertClient(
                "https://example.crm.dynamics.com",
                self.mock_credential,
                UpsertConfig(enable_logging=True, log_level="debug"),
            )
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(previous)

    def test_unknown_log_level_raises_value_error(self):
        logger = logging.getLogger("dataverse_upsert")
        previous = logger.level
        with self.assertRaises(ValueError) as ctx:
            UpsertClient(
                "https://example.crm.dynamics.com",
                self.mock_credential,
                UpsertConfig(enable_logging=True, log_level="verbose"),
            )
        self.assertIn("verbose", str(ctx.exception))
        self.assertEqual(logger.level, previous)


if __name__ == "__main__":
    unittest.main()
