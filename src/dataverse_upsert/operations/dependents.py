# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Build opportunity records for an account, skipping names it already has."""

from __future__ import annotations

import calendar
import datetime as _dt
import logging
from typing import List, Optional, Sequence

from ..common.constants import (
    OPPORTUNITY_ACCOUNT,
    OPPORTUNITY_AMOUNT,
    OPPORTUNITY_CLOSE_DATE,
    OPPORTUNITY_NAME,
    OPPORTUNITY_STAGE,
    OPPORTUNITY_TABLE,
)
from ..core.config import UpsertConfig
from ..core.errors import ValidationError
from ..core._error_codes import VALIDATION_PARENT_ID_MISSING
from ..models.query import RecordQuery
from ..models.record import Record
from ..store.base import RecordStore

_logger = logging.getLogger(__name__)


def add_months(day: _dt.date, months: int) -> _dt.date:
    """Shift ``day`` by ``months``, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return _dt.date(year, month, min(day.day, last))


def existing_dependent_names(store: RecordStore, parent: Record) -> set:
    """Names of every opportunity that references ``parent``."""
    query = RecordQuery(
        OPPORTUNITY_TABLE,
        filters={OPPORTUNITY_ACCOUNT: parent.id},
        select=[OPPORTUNITY_NAME],
    )
    return {r.get(OPPORTUNITY_NAME) for r in store.query(query)}


def build_new_dependents(
    store: RecordStore,
    parent: Record,
    candidate_names: Sequence[str],
    config: Optional[UpsertConfig] = None,
    *,
    today: Optional[_dt.date] = None,
) -> List[Record]:
    """
    Build unsaved opportunities for each candidate name the account does not have yet.

    Candidates are only compared with opportunities already in the store, not
    with each other, so ``["A", "B", "A"]`` against an empty account yields
    three records. Existing names are skipped, never updated.

    :param store: Record store.
    :type store: ~dataverse_upsert.store.base.RecordStore
    :param parent: Persisted account handle.
    :type parent: ~dataverse_upsert.models.record.Record
    :param candidate_names: Opportunity names, in order.
    :type candidate_names: Sequence[str]
    :param config: Supplies default stage, amount and close-date offset.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None
    :param today: Reference date for the close date (default: ``date.today()``).
    :type today: datetime.date or None
    :return: New, unsaved opportunity records in candidate order.
    :rtype: list[~dataverse_upsert.models.record.Record]
    :raises ValidationError: If ``parent`` has no id.
    """
    if not parent.id:
        raise ValidationError("Parent record must be persisted before building dependents", subcode=VALIDATION_PARENT_ID_MISSING)
    names = list(candidate_names)
    if not names:
        return []
    cfg = config or UpsertConfig.from_env()
    close_date = add_months(today or _dt.date.today(), cfg.close_date_months)

    existing = existing_dependent_names(store, parent)
    out: List[Record] = []
    for name in names:
        if name in existing:
            _logger.debug("skipping opportunity %r, already on account %s", name, parent.id)
            continue
        out.append(
            Record(
                table=OPPORTUNITY_TABLE,
                data={
                    OPPORTUNITY_NAME: name,
                    OPPORTUNITY_STAGE: cfg.default_stage,
                    OPPORTUNITY_AMOUNT: cfg.default_amount,
                    OPPORTUNITY_CLOSE_DATE: close_date,
                    OPPORTUNITY_ACCOUNT: parent.id,
                },
            )
        )
    return out


def upsert_new_dependents(
    store: RecordStore,
    parent: Record,
    candidate_names: Sequence[str],
    config: Optional[UpsertConfig] = None,
    *,
    today: Optional[_dt.date] = None,
) -> List[Record]:
    """Build deduplicated opportunities and submit them as one combined upsert."""
    new = build_new_dependents(store, parent, candidate_names, config, today=today)
    if new:
        store.upsert(new)
        _logger.debug("upserted %d opportunity record(s) for account %s", len(new), parent.id)
    return new


__all__ = ["add_months", "build_new_dependents", "existing_dependent_names", "upsert_new_dependents"]
