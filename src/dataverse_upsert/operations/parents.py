# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Find-or-create a parent (account) record by its name.

Resolution is split into a pure decision, :func:`decide_parent`, and a thin
write step, :func:`apply_parent_decision`. :func:`resolve_or_create_parent`
runs the query, the decision and the write in that order.

When several accounts share a name the first one returned by the store wins.
No error is raised for the ambiguity.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.constants import ACCOUNT_NAME, ACCOUNT_NOTE, ACCOUNT_TABLE
from ..core.config import UpsertConfig
from ..core.errors import ValidationError
from ..core._error_codes import VALIDATION_NAME_EMPTY
from ..models.decision import INSERT, UPDATE, ParentDecision
from ..models.query import RecordQuery
from ..models.record import Record
from ..store.base import RecordStore

_logger = logging.getLogger(__name__)


def _require_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Parent name must be a non-empty string", subcode=VALIDATION_NAME_EMPTY)
    return name


def parent_query(name: str) -> RecordQuery:
    """Query for at most one account whose name exactly equals ``name``."""
    return RecordQuery(ACCOUNT_TABLE, filters={ACCOUNT_NAME: name}, select=[ACCOUNT_NAME], top=1)


def decide_parent(
    name: str,
    matches: Sequence[Record],
    config: Optional[UpsertConfig] = None,
) -> ParentDecision:
    """
    Decide how to resolve ``name`` given a snapshot of matching accounts.

    :param name: Account name.
    :type name: str
    :param matches: Accounts the store returned for ``name``, in store order.
    :type matches: Sequence[Record]
    :param config: Supplies the created/updated marker values.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None
    :return: ``update`` on the first match with the updated marker, or ``insert``
        of a new account with the created marker.
    :rtype: ~dataverse_upsert.models.decision.ParentDecision
    :raises ValidationError: If ``name`` is empty.
    """
    _require_name(name)
    cfg = config or UpsertConfig.from_env()
    if matches:
        first = matches[0]
        handle = Record(
            table=ACCOUNT_TABLE,
            data={ACCOUNT_NAME: first.get(ACCOUNT_NAME, name), ACCOUNT_NOTE: cfg.updated_marker},
            id=first.id,
        )
        return ParentDecision(UPDATE, handle)
    return ParentDecision(
        INSERT,
        Record(table=ACCOUNT_TABLE, data={ACCOUNT_NAME: name, ACCOUNT_NOTE: cfg.created_marker}),
    )


def apply_parent_decision(store: RecordStore, decision: ParentDecision) -> Record:
    """Issue the single write a decision calls for and return the persisted handle."""
    if decision.creates:
        store.insert(decision.record)
    else:
        store.update(decision.record)
    _logger.debug("parent %r %sd as %s", decision.record.get(ACCOUNT_NAME), decision.action, decision.record.id)
    return decision.record


def resolve_or_create_parent(
    store: RecordStore,
    name: str,
    config: Optional[UpsertConfig] = None,
) -> Record:
    """
    Return a persisted account named ``name``, creating it if needed.

    Exactly one write is issued: an insert of the new account, or an update
    setting the note column of the existing one to the updated marker.

    :param store: Record store.
    :type store: ~dataverse_upsert.store.base.RecordStore
    :param name: Account name.
    :type name: str
    :param config: Optional configuration.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None
    :return: Account handle with a valid id.
    :rtype: ~dataverse_upsert.models.record.Record
    :raises ValidationError: If ``name`` is empty.

    Example::

        account = resolve_or_create_parent(store, "Contoso")
        print(account.id, account["description"])
    """
    _require_name(name)
    matches = store.query(parent_query(name))
    return apply_parent_decision(store, decide_parent(name, matches, config))


__all__ = ["decide_parent", "apply_parent_decision", "resolve_or_create_parent", "parent_query"]
