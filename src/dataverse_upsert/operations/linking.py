# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Link dependents to accounts named by one of their own columns."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.constants import CONTACT_ACCOUNT, CONTACT_LAST_NAME
from ..core.config import UpsertConfig
from ..models.record import Record
from ..store.base import RecordStore
from .parents import resolve_or_create_parent

_logger = logging.getLogger(__name__)


def link_dependents_to_named_parents(
    store: RecordStore,
    dependents: Sequence[Record],
    config: Optional[UpsertConfig] = None,
    *,
    key_field: str = CONTACT_LAST_NAME,
    reference_field: str = CONTACT_ACCOUNT,
) -> None:
    """
    Resolve an account per dependent and write every dependent in one upsert.

    The account name is the dependent's ``key_field`` value, used verbatim.
    Each dependent costs one resolver round trip, so this is meant for small
    batches. Accounts resolved before a failure stay written.

    :param store: Record store.
    :type store: ~dataverse_upsert.store.base.RecordStore
    :param dependents: Records to link, e.g. contacts.
    :type dependents: Sequence[Record]
    :param config: Optional configuration passed to the resolver.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None
    :param key_field: Column holding the account name (default: ``lastname``).
    :type key_field: str
    :param reference_field: Lookup column set to the account id (default: ``parentcustomerid``).
    :type reference_field: str
    :raises ValidationError: If a dependent's ``key_field`` is empty.

    Example::

        contacts = [Record("contact", {"firstname": "John", "lastname": "Doe"})]
        link_dependents_to_named_parents(store, contacts)
    """
    batch = list(dependents)
    if not batch:
        return None
    for dependent in batch:
        parent = resolve_or_create_parent(store, dependent.get(key_field), config)
        dependent[reference_field] = parent.id
    store.upsert(batch)
    _logger.debug("linked %d record(s) to named parents", len(batch))
    return None


__all__ = ["link_dependents_to_named_parents"]
