# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the linked create cascade."""

import pytest

from dataverse_upsert.core.errors import ValidationError
from dataverse_upsert.models.record import Record
from dataverse_upsert.operations.linking import link_dependents_to_named_parents


def _contact(first, last):
    return Record("contact", {"firstname": first, "lastname": last})


class TestLinkDependentsToNamedParents:
    def test_creates_parents_and_links_in_one_final_write(self, memory_store, test_config):
        contacts = [_contact("John", "Doe"), _contact("Mary", "Jane")]

        link_dependents_to_named_parents(memory_store, contacts, test_config)

        accounts = {r["name"]: r for r in memory_store.rows("account")}
        assert set(accounts) == {"Doe", "Jane"}
        assert all(a["description"] == "New" for a in accounts.values())
        assert contacts[0]["parentcustomerid"] == accounts["Doe"].id
        assert contacts[1]["parentcustomerid"] == accounts["Jane"].id
        assert memory_store.write_calls == [("insert", 1), ("insert", 1), ("upsert", 2)]
        assert all(c.id for c in contacts)

    def test_existing_parent_reused(self, memory_store, test_config):
        doe = memory_store.seed("account", {"name": "Doe"})
        contacts = [_contact("John", "Doe"), _contact("Jane", "Doe")]

        link_dependents_to_named_parents(memory_store, contacts, test_config)

        assert len(memory_store.rows("account")) == 1
        assert [c["parentcustomerid"] for c in contacts] == [doe.id, doe.id]
        assert memory_store.count_writes("upsert") == 1

    def test_existing_dependents_updated_in_place(self, memory_store, test_config):
        seeded = memory_store.seed("contact", {"firstname": "John", "lastname": "Doe"})
        contact = Record("contact", {"firstname": "John", "lastname": "Doe"}, id=seeded.id)

        link_dependents_to_named_parents(memory_store, [contact], test_config)

        (row,) = memory_store.rows("contact")
        assert row.id == seeded.id
        assert row["parentcustomerid"] == memory_store.rows("account")[0].id

    def test_custom_key_field(self, memory_store, test_config):
        contact = Record("contact", {"firstname": "Ann", "lastname": "Lee", "company": "Acme"})

        link_dependents_to_named_parents(memory_store, [contact], test_config, key_field="company")

        assert memory_store.rows("account")[0]["name"] == "Acme"

    def test_empty_input_no_store_calls(self, memory_store):
        link_dependents_to_named_parents(memory_store, [])
        assert memory_store.queries == []
        assert memory_store.write_calls == []

    def test_missing_key_propagates_before_final_write(self, memory_store):
        contacts = [_contact("John", "Doe"), Record("contact", {"firstname": "NoLast"})]

        with pytest.raises(ValidationError):
            link_dependents_to_named_parents(memory_store, contacts)

        assert memory_store.count_writes("upsert") == 0
        assert len(memory_store.rows("account")) == 1
