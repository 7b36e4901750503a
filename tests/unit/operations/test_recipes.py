# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import datetime as _dt
import unittest

import pandas as pd

from dataverse_upsert.core.config import UpsertConfig
from dataverse_upsert.core.errors import RecordNotFoundError
from dataverse_upsert.operations.recipes import RecordRecipes
from dataverse_upsert.store.memory import InMemoryRecordStore


class TestRecordRecipes(unittest.TestCase):
    """Each recipe against a fresh in-memory store."""

    def setUp(self):
        self.store = InMemoryRecordStore()
        self.recipes = RecordRecipes(self.store, UpsertConfig())

    # ------------------------------------------------------------------ insert

    def test_insert_account(self):
        account = self.recipes.insert_account("Contoso", account_type="Prospect")

        self.assertTrue(account.id)
        self.assertEqual(self.store.write_calls, [("insert", 1)])
        (row,) = self.store.rows("account")
        self.assertEqual(row.to_dict(), {"name": "Contoso", "new_type": "Prospect"})

    def test_insert_account_without_type(self):
        account = self.recipes.insert_account("Contoso")
        self.assertNotIn("new_type", account)

    # ------------------------------------------------------------------ update

    def test_update_account(self):
        seeded = self.store.seed("account", {"name": "Contoso"})

        account = self.recipes.update_account("Contoso", {"new_type": "Customer"})

        self.assertEqual(account.id, seeded.id)
        self.assertEqual(self.store.rows("account")[0]["new_type"], "Customer")

    def test_update_account_missing_raises(self):
        with self.assertRaises(RecordNotFoundError):
            self.recipes.update_account("Nobody", {"new_type": "Customer"})
        self.assertEqual(self.store.write_calls, [])

    # ------------------------------------------------------------------ upsert

    def test_upsert_account_creates_then_updates(self):
        created = self.recipes.upsert_account("Contoso")
        self.assertEqual(created["description"], "Created")

        updated = self.recipes.upsert_account("Contoso")
        self.assertEqual(updated.id, created.id)
        self.assertEqual(self.store.rows("account")[0]["description"], "Updated")

    def test_upsert_opportunities_dedups_against_store(self):
        account = self.store.seed("account", {"name": "Contoso"})
        self.store.seed("opportunity", {"name": "Renewal", "parentaccountid": account.id})

        new = self.recipes.upsert_opportunities(
            "Contoso", ["Renewal", "Expansion"], today=_dt.date(2026, 10, 19)
        )

        self.assertEqual([o["name"] for o in new], ["Expansion"])
        self.assertEqual(new[0]["estimatedclosedate"], _dt.date(2026, 11, 19))
        self.assertEqual(new[0]["parentaccountid"], account.id)
        self.assertEqual(self.store.write_calls, [("update", 1), ("upsert", 1)])

    def test_upsert_opportunities_new_account(self):
        new = self.recipes.upsert_opportunities("Fabrikam", ["A", "B"])

        (account,) = self.store.rows("account")
        self.assertEqual(account["name"], "Fabrikam")
        self.assertEqual({o["parentaccountid"] for o in new}, {account.id})

    def test_upsert_opportunities_empty_list(self):
        new = self.recipes.upsert_opportunities("Fabrikam", [])

        self.assertEqual(new, [])
        self.assertEqual(self.store.write_calls, [])
        self.assertEqual(self.store.rows("account"), [])

    def test_upsert_opportunities_empty_list_leaves_existing_account(self):
        self.store.seed("account", {"name": "Contoso", "description": "original"})

        new = self.recipes.upsert_opportunities("Contoso", [])

        self.assertEqual(new, [])
        self.assertEqual(self.store.write_calls, [])
        self.assertEqual(self.store.rows("account")[0]["description"], "original")

    # ------------------------------------------------------------------- link

    def test_create_and_link_contacts(self):
        contacts = self.recipes.create_and_link_contacts(
            [
                {"firstname": "John", "lastname": "Doe"},
                {"firstname": "Mary", "lastname": "Jane"},
            ]
        )

        names = {a.id: a["name"] for a in self.store.rows("account")}
        self.assertEqual(sorted(names.values()), ["Doe", "Jane"])
        self.assertEqual([names[c["parentcustomerid"]] for c in contacts], ["Doe", "Jane"])
        self.assertEqual(self.store.count_writes("upsert"), 1)

    def test_create_and_link_contacts_from_dataframe(self):
        df = pd.DataFrame(
            [
                {"firstname": "John", "lastname": "Doe", "jobtitle": None},
                {"firstname": "Jane", "lastname": "Doe", "jobtitle": "CFO"},
            ]
        )

        contacts = self.recipes.create_and_link_contacts(df)

        self.assertEqual(len(self.store.rows("account")), 1)
        self.assertNotIn("jobtitle", contacts[0])
        self.assertEqual(contacts[1]["jobtitle"], "CFO")
        self.assertEqual(len(self.store.rows("contact")), 2)

    def test_create_and_link_contacts_empty(self):
        self.assertEqual(self.recipes.create_and_link_contacts([]), [])
        self.assertEqual(self.store.write_calls, [])

    # ----------------------------------------------------------------- delete

    def test_create_and_delete_account(self):
        rid = self.recipes.create_and_delete_account("Disposable")

        self.assertTrue(rid)
        self.assertEqual(self.store.rows("account"), [])
        self.assertEqual(self.store.write_calls, [("insert", 1), ("delete", 1)])


if __name__ == "__main__":
    unittest.main()
