# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Standalone record manipulation recipes."""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from ..common.constants import (
    ACCOUNT_NAME,
    ACCOUNT_TABLE,
    ACCOUNT_TYPE,
    CONTACT_TABLE,
)
from ..core.config import UpsertConfig
from ..core.errors import RecordNotFoundError
from ..core._error_codes import RECORD_NOT_FOUND
from ..models.record import Record
from ..store.base import RecordStore
from ..utils._pandas import dataframe_to_records
from .dependents import upsert_new_dependents
from .linking import link_dependents_to_named_parents
from .parents import parent_query, resolve_or_create_parent

_logger = logging.getLogger(__name__)


class RecordRecipes:
    """
    One method per record manipulation pattern.

    Recipes share nothing but the injected store and config; each one can be
    called and tested on its own. Store errors propagate unchanged.

    :param store: Record store.
    :type store: ~dataverse_upsert.store.base.RecordStore
    :param config: Optional configuration.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None

    Example::

        recipes = RecordRecipes(InMemoryRecordStore())
        account = recipes.upsert_account("Contoso")
        recipes.upsert_opportunities("Contoso", ["Renewal", "Expansion"])
    """

    def __init__(self, store: RecordStore, config: Optional[UpsertConfig] = None) -> None:
        self._store = store
        self._config = config or UpsertConfig.from_env()

    def insert_account(self, name: str, account_type: Optional[str] = None) -> Record:
        """Insert a single account and return it with its new id."""
        data: Dict[str, Any] = {ACCOUNT_NAME: name}
        if account_type is not None:
            data[ACCOUNT_TYPE] = account_type
        account = Record(table=ACCOUNT_TABLE, data=data)
        self._store.insert(account)
        return account

    def update_account(self, name: str, changes: Dict[str, Any]) -> Record:
        """
        Apply ``changes`` to the account named ``name``.

        :raises RecordNotFoundError: If no account has that name.
        """
        matches = self._store.query(parent_query(name))
        if not matches:
            raise RecordNotFoundError(
                f"No account named {name!r}",
                subcode=RECORD_NOT_FOUND,
                details={"table": ACCOUNT_TABLE, "name": name},
            )
        account = Record(table=ACCOUNT_TABLE, data=dict(changes), id=matches[0].id)
        self._store.update(account)
        return account

    def upsert_account(self, name: str) -> Record:
        """Find the account named ``name`` and mark it updated, or create it."""
        return resolve_or_create_parent(self._store, name, self._config)

    def upsert_opportunities(
        self,
        account_name: str,
        opportunity_names: Sequence[str],
        *,
        today: Optional[_dt.date] = None,
    ) -> List[Record]:
        """
        Add opportunities the account does not have yet, in one combined write.

        :return: The opportunities that were created.
        """
        names = list(opportunity_names)
        if not names:
            return []
        account = resolve_or_create_parent(self._store, account_name, self._config)
        return upsert_new_dependents(self._store, account, names, self._config, today=today)

    def create_and_link_contacts(
        self,
        contacts: Union[Sequence[Dict[str, Any]], pd.DataFrame],
    ) -> List[Record]:
        """
        Create contacts and link each to the account named after its last name.

        :param contacts: Column dicts (``firstname``, ``lastname``, ...) or a DataFrame
            with those columns.
        :return: The written contacts, each carrying its id and account reference.
        """
        if isinstance(contacts, pd.DataFrame):
            rows = dataframe_to_records(contacts)
        else:
            rows = [dict(c) for c in contacts]
        records = [Record(table=CONTACT_TABLE, data=row) for row in rows]
        link_dependents_to_named_parents(self._store, records, self._config)
        return records

    def create_and_delete_account(self, name: str) -> str:
        """Insert a disposable account, delete it, and return the id it had."""
        account = self.insert_account(name)
        self._store.delete(account)
        _logger.debug("disposable account %s deleted", account.id)
        return account.id


__all__ = ["RecordRecipes"]
