# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Table and column names used by the upsert recipes.

Parent records live in ``account``; dependents live in ``opportunity`` and
``contact`` and reference their account through a lookup column.
"""

# Parent table
ACCOUNT_TABLE = "account"
ACCOUNT_NAME = "name"
ACCOUNT_TYPE = "new_type"
"""Free-text classification column (custom column on account)."""
ACCOUNT_NOTE = "description"

# Opportunity dependents
OPPORTUNITY_TABLE = "opportunity"
OPPORTUNITY_NAME = "name"
OPPORTUNITY_STAGE = "stepname"
OPPORTUNITY_AMOUNT = "estimatedvalue"
OPPORTUNITY_CLOSE_DATE = "estimatedclosedate"
OPPORTUNITY_ACCOUNT = "parentaccountid"

# Contact dependents
CONTACT_TABLE = "contact"
CONTACT_FIRST_NAME = "firstname"
CONTACT_LAST_NAME = "lastname"
CONTACT_ACCOUNT = "parentcustomerid"

# Lookup columns: (table, column) -> (navigation property used for @odata.bind, target table)
LOOKUP_BINDINGS = {
    (OPPORTUNITY_TABLE, OPPORTUNITY_ACCOUNT): ("parentaccountid", ACCOUNT_TABLE),
    (CONTACT_TABLE, CONTACT_ACCOUNT): ("parentcustomerid_account", ACCOUNT_TABLE),
}
