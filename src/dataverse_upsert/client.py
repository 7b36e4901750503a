# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Optional

import requests

from azure.core.credentials import TokenCredential

from .core._auth import _AuthManager
from .core.config import UpsertConfig
from .operations.recipes import RecordRecipes
from .store.dataverse import DataverseRecordStore

_PACKAGE_LOGGER = "dataverse_upsert"


class UpsertClient:
    """
    High-level entry point for the record upsert recipes against Dataverse.

    Builds a :class:`~dataverse_upsert.store.dataverse.DataverseRecordStore`
    lazily on first use and exposes the recipes under ``client.recipes``.

    **Context Manager Support (Recommended)**::

        with UpsertClient(base_url, credential) as client:
            client.recipes.upsert_opportunities("Contoso", ["Renewal"])

    **Without Context Manager**::

        client = UpsertClient(base_url, credential)
        try:
            client.recipes.upsert_account("Contoso")
        finally:
            client.close()

    :param base_url: Your Dataverse environment URL, for example
        ``"https://org.crm.dynamics.com"``. Trailing slash is automatically removed.
    :type base_url: :class:`str`
    :param credential: Azure Identity credential for authentication.
    :type credential: ~azure.core.credentials.TokenCredential
    :param config: Optional configuration. Defaults to :meth:`UpsertConfig.from_env`.
    :type config: ~dataverse_upsert.core.config.UpsertConfig or None

    :raises ValueError: If ``base_url`` is missing or empty after trimming.
    """

    def __init__(
        self,
        base_url: str,
        credential: TokenCredential,
        config: Optional[UpsertConfig] = None,
    ) -> None:
        self.auth = _AuthManager(credential)
        self._base_url = (base_url or "").rstrip("/")
        if not self._base_url:
            raise ValueError("base_url is required.")
        self._config = config or UpsertConfig.from_env()
        self._store: Optional[DataverseRecordStore] = None
        self._recipes: Optional[RecordRecipes] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

        if self._config.enable_logging:
            level = logging.getLevelName(self._config.log_level.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log_level: {self._config.log_level!r}")
            logging.getLogger(_PACKAGE_LOGGER).setLevel(level)

    def __enter__(self) -> "UpsertClient":
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the store and the HTTP session (if owned). Safe to call multiple times.
        """
        if self._store is not None:
            self._store.close()
            self._store = None
            self._recipes = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    @property
    def store(self) -> DataverseRecordStore:
        """The lazily-created Dataverse record store."""
        if self._store is None:
            self._store = DataverseRecordStore(
                self.auth,
                self._base_url,
                self._config,
                session=self._session,
            )
        return self._store

    @property
    def recipes(self) -> RecordRecipes:
        """Recipes bound to :attr:`store`."""
        if self._recipes is None:
            self._recipes = RecordRecipes(self.store, self._config)
        return self._recipes


__all__ = ["UpsertClient"]
