# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP client with timeout handling and optional session support.

This module provides :class:`~dataverse_upsert.core._http._HttpClient`, a thin
wrapper around the requests library that applies method-dependent timeouts and
optional connection pooling via session reuse. Requests are attempted once;
failures surface to the caller unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

import requests


class _HttpClient:
    """
    HTTP client with timeout handling and optional session support.

    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param session: Optional requests.Session for connection pooling.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute an HTTP request with timeout management.

        Applies default timeouts based on HTTP method (120s for POST/DELETE, 10s for others).
        When a session is configured, uses the session for connection pooling; otherwise uses
        standalone requests.

        :param method: HTTP method (GET, POST, PATCH, DELETE, etc.).
        :type method: :class:`str`
        :param url: Target URL for the request.
        :type url: :class:`str`
        :return: HTTP response object.
        :rtype: :class:`requests.Response`
        :raises requests.exceptions.RequestException: If the request fails at the network level.
        """
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                m = (method or "").lower()
                kwargs["timeout"] = 120 if m in ("post", "delete") else 10

        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def close(self) -> None:
        """Drop the session reference. The owner of the session closes it."""
        self._session = None
