# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from typing import Optional

# HTTP subcodes follow the "http_<status>" pattern
HTTP_404 = "http_404"
HTTP_429 = "http_429"
HTTP_500 = "http_500"

TRANSIENT_STATUS = {429, 502, 503, 504}

# Validation subcodes
VALIDATION_NAME_EMPTY = "validation_name_empty"
VALIDATION_PARENT_ID_MISSING = "validation_parent_id_missing"
VALIDATION_RECORD_ID_MISSING = "validation_record_id_missing"
VALIDATION_RECORD_ID_PRESENT = "validation_record_id_present"
VALIDATION_RECORD_TYPE = "validation_record_type"
VALIDATION_DUPLICATE_ID = "validation_duplicate_id"

# Lookup subcodes
RECORD_NOT_FOUND = "record_not_found"

# Metadata subcodes
METADATA_TABLE_NOT_FOUND = "metadata_table_not_found"
METADATA_ENTITYSET_NAME_MISSING = "metadata_entityset_name_missing"


def _http_subcode(status: int) -> str:
    return f"http_{status}"


def _is_transient_status(status: Optional[int]) -> bool:
    return status in TRANSIENT_STATUS
