# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UpsertConfig:
    """
    Configuration settings for the record upsert helpers.

    :param created_marker: Note value stamped on parent records created by the resolver.
    :type created_marker: str
    :param updated_marker: Note value stamped on parent records matched by the resolver.
    :type updated_marker: str
    :param default_stage: Stage assigned to newly built dependent records.
    :type default_stage: str
    :param default_amount: Amount assigned to newly built dependent records.
    :type default_amount: float
    :param close_date_months: Months added to today's date for the close date of new dependents.
    :type close_date_months: int
    :param api_version: Dataverse Web API version segment (default: ``"v9.2"``).
    :type api_version: str
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param enable_logging: Whether the client should set the package logger level.
    :type enable_logging: bool
    :param log_level: Level name applied to the package logger when logging is enabled.
    :type log_level: str
    """
    created_marker: str = "Created"
    updated_marker: str = "Updated"

    # Defaults for dependents built by the dedup builder
    default_stage: str = "Prospecting"
    default_amount: float = 1000.0
    close_date_months: int = 1

    api_version: str = "v9.2"
    http_timeout: Optional[float] = None

    enable_logging: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "UpsertConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~dataverse_upsert.core.config.UpsertConfig
        """
        # Environment-free defaults
        return cls(
            created_marker="Created",
            updated_marker="Updated",
            default_stage="Prospecting",
            default_amount=1000.0,
            close_date_months=1,
            api_version="v9.2",
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
        )
