# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for find-or-create parent resolution."""

import pytest

from dataverse_upsert.core.errors import ValidationError
from dataverse_upsert.core._error_codes import VALIDATION_NAME_EMPTY
from dataverse_upsert.models.decision import INSERT, UPDATE
from dataverse_upsert.models.record import Record
from dataverse_upsert.operations.parents import (
    apply_parent_decision,
    decide_parent,
    parent_query,
    resolve_or_create_parent,
)


class TestDecideParent:
    """The decision step needs no store."""

    def test_no_match_inserts_with_created_marker(self, test_config):
        decision = decide_parent("Contoso", [], test_config)
        assert decision.action == INSERT
        assert decision.creates is True
        assert decision.record.id is None
        assert decision.record.to_dict() == {"name": "Contoso", "description": "New"}

    def test_match_updates_with_updated_marker(self, test_config):
        match = Record("account", {"name": "Contoso"}, id="acc-1")
        decision = decide_parent("Contoso", [match], test_config)
        assert decision.action == UPDATE
        assert decision.record.id == "acc-1"
        assert decision.record["description"] == "Updated"

    def test_first_match_wins(self, test_config):
        first = Record("account", {"name": "Dup"}, id="first")
        second = Record("account", {"name": "Dup"}, id="second")
        decision = decide_parent("Dup", [first, second], test_config)
        assert decision.record.id == "first"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, name):
        with pytest.raises(ValidationError) as ei:
            decide_parent(name, [])
        assert ei.value.subcode == VALIDATION_NAME_EMPTY


class TestParentQuery:
    def test_exact_name_limit_one(self):
        q = parent_query("Contoso")
        assert q.table == "account"
        assert q.filters == {"name": "Contoso"}
        assert q.top == 1


class TestResolveOrCreateParent:
    def test_creates_exactly_one_record(self, memory_store, test_config):
        account = resolve_or_create_parent(memory_store, "Contoso", test_config)

        rows = memory_store.rows("account")
        assert len(rows) == 1
        assert rows[0].id == account.id
        assert rows[0]["description"] == "New"
        assert memory_store.write_calls == [("insert", 1)]

    def test_existing_name_updated_not_duplicated(self, memory_store, test_config):
        seeded = memory_store.seed("account", {"name": "Contoso", "description": "old"})

        account = resolve_or_create_parent(memory_store, "Contoso", test_config)

        assert account.id == seeded.id
        rows = memory_store.rows("account")
        assert len(rows) == 1
        assert rows[0]["description"] == "Updated"
        assert memory_store.write_calls == [("update", 1)]

    def test_second_resolution_returns_same_id(self, memory_store, test_config):
        first = resolve_or_create_parent(memory_store, "Fabrikam", test_config)
        second = resolve_or_create_parent(memory_store, "Fabrikam", test_config)

        assert second.id == first.id
        assert len(memory_store.rows("account")) == 1

    def test_duplicate_names_in_store_pick_first(self, memory_store, test_config):
        first = memory_store.seed("account", {"name": "Dup"})
        memory_store.seed("account", {"name": "Dup"})

        account = resolve_or_create_parent(memory_store, "Dup", test_config)

        assert account.id == first.id

    def test_name_match_is_case_sensitive(self, memory_store, test_config):
        memory_store.seed("account", {"name": "contoso"})

        account = resolve_or_create_parent(memory_store, "Contoso", test_config)

        assert len(memory_store.rows("account")) == 2
        assert account["description"] == "New"

    def test_empty_name_issues_no_store_calls(self, memory_store):
        with pytest.raises(ValidationError):
            resolve_or_create_parent(memory_store, "")
        assert memory_store.queries == []
        assert memory_store.write_calls == []

    def test_apply_decision_writes_once(self, memory_store, test_config):
        decision = decide_parent("Northwind", [], test_config)
        handle = apply_parent_decision(memory_store, decision)
        assert handle.id
        assert memory_store.count_writes() == 1
