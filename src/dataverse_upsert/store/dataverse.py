# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Dataverse Web API implementation of the record store."""

from __future__ import annotations

import datetime as _dt
import logging
import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional, Tuple

import requests

from ..common.constants import LOOKUP_BINDINGS
from ..core._error_codes import (
    METADATA_ENTITYSET_NAME_MISSING,
    METADATA_TABLE_NOT_FOUND,
    VALIDATION_RECORD_ID_MISSING,
    VALIDATION_RECORD_ID_PRESENT,
    _http_subcode,
    _is_transient_status,
)
from ..core._http import _HttpClient
from ..core.config import UpsertConfig
from ..core.errors import HttpError, MetadataError, ValidationError
from ..models.query import RecordQuery
from ..models.record import Record
from .base import RecordOrRecords, _as_record_list

_logger = logging.getLogger(__name__)

_GUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

_CALL_SCOPE_CORRELATION_ID: ContextVar[Optional[str]] = ContextVar("_CALL_SCOPE_CORRELATION_ID", default=None)


class DataverseRecordStore:
    """
    :class:`~dataverse_upsert.store.base.RecordStore` backed by the Dataverse Web API.

    Table metadata (entity set name and primary id column) is looked up once per
    table and cached. Lookup columns listed in
    :data:`~dataverse_upsert.common.constants.LOOKUP_BINDINGS` are written with
    ``@odata.bind`` and read/filtered through their ``_<column>_value`` form.

    :param auth: Object exposing ``_acquire_token(scope)``.
    :param base_url: Organization URL, e.g. ``"https://org.crm.dynamics.com"``.
    :type base_url: str
    :param config: Optional configuration.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None
    :param session: Optional shared ``requests.Session``.
    :type session: requests.Session or None

    :raises ValueError: If ``base_url`` is empty.
    """

    def __init__(
        self,
        auth,
        base_url: str,
        config: Optional[UpsertConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = auth
        self.base_url = (base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("base_url is required.")
        self.config = config or UpsertConfig.from_env()
        self.api = f"{self.base_url}/api/data/{self.config.api_version}"
        self._http = _HttpClient(timeout=self.config.http_timeout, session=session)
        # Cache: logical name -> (entity set name, primary id attribute)
        self._table_cache: Dict[str, Tuple[str, str]] = {}

    def close(self) -> None:
        self._http.close()
        self._table_cache.clear()

    # ----------------------------------------------------------- transport

    @contextmanager
    def _call_scope(self) -> Iterator[str]:
        """Share one correlation id across every request issued inside the block."""
        correlation_id = str(uuid.uuid4())
        token = _CALL_SCOPE_CORRELATION_ID.set(correlation_id)
        try:
            yield correlation_id
        finally:
            _CALL_SCOPE_CORRELATION_ID.reset(token)

    def _headers(self) -> Dict[str, str]:
        """Build standard OData headers with bearer auth."""
        scope = f"{self.base_url}/.default"
        token = self.auth._acquire_token(scope).access_token
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "OData-MaxVersion": "4.0",
            "OData-Version": "4.0",
        }

    def _request(self, method: str, url: str, **kwargs: Any):
        headers = dict(kwargs.pop("headers", None) or {})
        headers["x-ms-client-request-id"] = str(uuid.uuid4())
        correlation_id = _CALL_SCOPE_CORRELATION_ID.get()
        if correlation_id:
            headers["x-ms-correlation-id"] = correlation_id
        r = self._http._request(method, url, headers=headers, **kwargs)
        if r.status_code >= 400:
            raise self._http_error(method, url, r)
        return r

    @staticmethod
    def _http_error(method: str, url: str, r) -> HttpError:
        status = r.status_code
        resp_headers = r.headers or {}
        service_code = None
        message = None
        try:
            body = r.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            service_code = body["error"].get("code")
            message = body["error"].get("message")
        retry_after = None
        if "Retry-After" in resp_headers:
            try:
                retry_after = int(resp_headers["Retry-After"])
            except (TypeError, ValueError):
                retry_after = None
        text = r.text or ""
        err = HttpError(
            f"{method.upper()} {url} failed with HTTP {status}: {message or text[:200] or 'no body'}",
            status_code=status,
            is_transient=_is_transient_status(status),
            subcode=_http_subcode(status),
            service_error_code=service_code,
            correlation_id=resp_headers.get("x-ms-correlation-request-id"),
            request_id=resp_headers.get("x-ms-service-request-id"),
            body_excerpt=text[:200] if text else None,
            retry_after=retry_after,
        )
        _logger.warning("%s %s -> %s (%s)", method.upper(), url, status, err.subcode)
        return err

    # ------------------------------------------------------------ metadata

    def _table_metadata(self, table: str) -> Tuple[str, str]:
        """Return ``(entity_set, primary_id_attribute)`` for a table logical name (cached)."""
        logical = (table or "").strip().lower()
        cached = self._table_cache.get(logical)
        if cached:
            return cached
        url = f"{self.api}/EntityDefinitions"
        logical_escaped = logical.replace("'", "''")
        params = {
            "$select": "LogicalName,EntitySetName,PrimaryIdAttribute",
            "$filter": f"LogicalName eq '{logical_escaped}'",
        }
        r = self._request("get", url, headers=self._headers(), params=params)
        try:
            body = r.json()
            items = body.get("value", []) if isinstance(body, dict) else []
        except ValueError:
            items = []
        if not items:
            raise MetadataError(f"Unable to resolve table '{logical}'.", subcode=METADATA_TABLE_NOT_FOUND)
        md = items[0]
        entity_set = md.get("EntitySetName")
        if not entity_set:
            raise MetadataError(
                f"Metadata response missing EntitySetName for table '{logical}'.",
                subcode=METADATA_ENTITYSET_NAME_MISSING,
            )
        primary_id = md.get("PrimaryIdAttribute") or f"{logical}id"
        self._table_cache[logical] = (entity_set, primary_id)
        return entity_set, primary_id

    @staticmethod
    def _lookup_aliases(table: str) -> Dict[str, str]:
        return {column: f"_{column}_value" for (t, column) in LOOKUP_BINDINGS if t == table}

    # ------------------------------------------------------------- payload

    def _to_payload(self, record: Record) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for key, value in record.data.items():
            binding = LOOKUP_BINDINGS.get((record.table, key))
            if binding is not None:
                nav, target = binding
                if value:
                    target_set, _ = self._table_metadata(target)
                    payload[f"{nav}@odata.bind"] = f"/{target_set}({value})"
                continue
            if isinstance(value, (_dt.date, _dt.datetime)):
                value = value.isoformat()
            payload[key] = value
        return payload

    def _row_to_record(self, table: str, primary_id: str, row: Dict[str, Any]) -> Record:
        data = dict(row)
        for column, alias in self._lookup_aliases(table).items():
            if alias in data:
                data[column] = data.pop(alias)
        return Record.from_api_response(table, data, id_field=primary_id)

    @staticmethod
    def _guid_from_headers(r) -> str:
        headers = r.headers or {}
        for name in ("OData-EntityId", "OData-EntityID", "Location"):
            loc = headers.get(name)
            if loc:
                m = _GUID_RE.search(loc)
                if m:
                    return m.group(0)
        header_keys = ", ".join(sorted(headers.keys()))
        raise RuntimeError(
            f"Create response missing GUID in OData-EntityId/Location headers (status={getattr(r, 'status_code', '?')}). Headers: {header_keys}"
        )

    @staticmethod
    def _group_by_table(records: List[Record]) -> Dict[str, List[Record]]:
        groups: Dict[str, List[Record]] = {}
        for r in records:
            groups.setdefault(r.table, []).append(r)
        return groups

    # --------------------------------------------------------------- query

    def query(self, query: RecordQuery) -> List[Record]:
        """
        Run an equality query, following ``@odata.nextLink`` until ``top`` rows are collected.

        :param query: Query to run.
        :type query: ~dataverse_upsert.models.query.RecordQuery
        :return: Matching records in server order.
        :rtype: list[~dataverse_upsert.models.record.Record]
        """
        entity_set, primary_id = self._table_metadata(query.table)
        aliases = self._lookup_aliases(query.table)
        params: Dict[str, Any] = {}
        if query.select is not None:
            columns = [aliases.get(c, c) for c in query.select]
            if primary_id not in columns:
                columns.append(primary_id)
            params["$select"] = ",".join(columns)
        flt = query.build_filter(aliases)
        if flt:
            params["$filter"] = flt
        if query.top is not None:
            params["$top"] = int(query.top)

        out: List[Record] = []
        with self._call_scope():
            headers = self._headers()
            r = self._request("get", f"{self.api}/{entity_set}", headers=headers, params=params)
            while True:
                try:
                    body = r.json()
                except ValueError:
                    body = {}
                items = body.get("value") if isinstance(body, dict) else None
                for row in items or []:
                    if isinstance(row, dict):
                        out.append(self._row_to_record(query.table, primary_id, row))
                if query.top is not None and len(out) >= query.top:
                    return out[: query.top]
                next_link = body.get("@odata.nextLink") if isinstance(body, dict) else None
                if not next_link:
                    return out
                r = self._request("get", next_link, headers=headers)

    # -------------------------------------------------------------- writes

    def insert(self, records: RecordOrRecords) -> List[Record]:
        batch = _as_record_list(records)
        if not batch:
            return []
        for r in batch:
            if r.id:
                raise ValidationError(
                    f"Cannot insert {r.table} record that already has id {r.id}",
                    subcode=VALIDATION_RECORD_ID_PRESENT,
                )
        with self._call_scope():
            for table, group in self._group_by_table(batch).items():
                self._create(table, group)
        return batch

    def _create(self, table: str, group: List[Record]) -> None:
        entity_set, _ = self._table_metadata(table)
        if len(group) == 1:
            r = self._request("post", f"{self.api}/{entity_set}", headers=self._headers(), json=self._to_payload(group[0]))
            group[0].id = self._guid_from_headers(r)
            _logger.debug("created %s %s", table, group[0].id)
            return
        targets = []
        for rec in group:
            payload = self._to_payload(rec)
            payload["@odata.type"] = f"Microsoft.Dynamics.CRM.{table}"
            targets.append(payload)
        url = f"{self.api}/{entity_set}/Microsoft.Dynamics.CRM.CreateMultiple"
        r = self._request("post", url, headers=self._headers(), json={"Targets": targets})
        try:
            body = r.json() if r.text else {}
        except ValueError:
            body = {}
        ids = body.get("Ids") if isinstance(body, dict) else None
        if not isinstance(ids, list) or len(ids) != len(group):
            raise RuntimeError(f"CreateMultiple for '{table}' returned {ids!r} for {len(group)} record(s)")
        for rec, rid in zip(group, ids):
            rec.id = rid
        _logger.debug("created %d %s record(s)", len(group), table)

    def update(self, records: RecordOrRecords) -> List[Record]:
        batch = _as_record_list(records)
        if not batch:
            return []
        for r in batch:
            if not r.id:
                raise ValidationError("update requires record ids", subcode=VALIDATION_RECORD_ID_MISSING)
        with self._call_scope():
            for table, group in self._group_by_table(batch).items():
                self._update(table, group)
        return batch

    def _update(self, table: str, group: List[Record]) -> None:
        entity_set, primary_id = self._table_metadata(table)
        if len(group) == 1:
            headers = self._headers()
            headers["If-Match"] = "*"
            url = f"{self.api}/{entity_set}({group[0].id})"
            self._request("patch", url, headers=headers, json=self._to_payload(group[0]))
            _logger.debug("updated %s %s", table, group[0].id)
            return
        targets = []
        for rec in group:
            payload = self._to_payload(rec)
            payload[primary_id] = rec.id
            payload["@odata.type"] = f"Microsoft.Dynamics.CRM.{table}"
            targets.append(payload)
        url = f"{self.api}/{entity_set}/Microsoft.Dynamics.CRM.UpdateMultiple"
        self._request("post", url, headers=self._headers(), json={"Targets": targets})
        _logger.debug("updated %d %s record(s)", len(group), table)

    def upsert(self, records: RecordOrRecords) -> List[Record]:
        """
        Update records that carry an id and create the rest.

        Existing rows are written first, then new rows, each as one request per
        table. The Web API has no single request spanning both for
        primary-key-only tables.
        """
        batch = _as_record_list(records)
        if not batch:
            return []
        existing = [r for r in batch if r.id]
        new = [r for r in batch if not r.id]
        with self._call_scope():
            for table, group in self._group_by_table(existing).items():
                self._update(table, group)
            for table, group in self._group_by_table(new).items():
                self._create(table, group)
        return batch

    def delete(self, records: RecordOrRecords) -> None:
        batch = _as_record_list(records)
        if not batch:
            return None
        for r in batch:
            if not r.id:
                raise ValidationError("delete requires record ids", subcode=VALIDATION_RECORD_ID_MISSING)
        with self._call_scope():
            for rec in batch:
                entity_set, _ = self._table_metadata(rec.table)
                headers = self._headers()
                headers["If-Match"] = "*"
                self._request("delete", f"{self.api}/{entity_set}({rec.id})", headers=headers)
                _logger.debug("deleted %s %s", rec.table, rec.id)
        return None


__all__ = ["DataverseRecordStore"]
