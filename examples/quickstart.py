# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Walk through every record recipe against a live Dataverse environment.

This example shows:
- Single insert
- Update of an account found by name
- Conditional upsert by name
- Bulk opportunity upsert with de-duplication
- Contacts created and linked to accounts named after their last name
- Create-then-delete of a disposable account

Prerequisites:
- pip install -e .
- The account table has a free-text ``new_type`` column.
"""

import sys
import traceback

from azure.identity import InteractiveBrowserCredential

from dataverse_upsert.client import UpsertClient
from dataverse_upsert.core.errors import RecordStoreError


# Simple logging helper
def log_call(description):
    print(f"\n→ {description}")


def main():
    base_url = input("Enter Dataverse org URL (e.g. https://yourorg.crm.dynamics.com): ").strip()
    if not base_url:
        print("No URL entered; exiting.")
        sys.exit(1)

    log_call("InteractiveBrowserCredential()")
    credential = InteractiveBrowserCredential()

    with UpsertClient(base_url, credential) as client:
        recipes = client.recipes
        try:
            log_call("recipes.insert_account('Quickstart Insert', account_type='Prospect')")
            account = recipes.insert_account("Quickstart Insert", account_type="Prospect")
            print({"id": account.id})

            log_call("recipes.update_account('Quickstart Insert', {'new_type': 'Customer'})")
            recipes.update_account("Quickstart Insert", {"new_type": "Customer"})

            log_call("recipes.upsert_account('Quickstart Upsert') twice")
            first = recipes.upsert_account("Quickstart Upsert")
            second = recipes.upsert_account("Quickstart Upsert")
            print({"first": first.id, "second": second.id, "note": second["description"]})

            log_call("recipes.upsert_opportunities('Quickstart Upsert', [...])")
            created = recipes.upsert_opportunities("Quickstart Upsert", ["Renewal", "Expansion", "Renewal"])
            print({"created": [o["name"] for o in created]})
            again = recipes.upsert_opportunities("Quickstart Upsert", ["Renewal", "Support"])
            print({"created_second_run": [o["name"] for o in again]})

            log_call("recipes.create_and_link_contacts([...])")
            contacts = recipes.create_and_link_contacts(
                [
                    {"firstname": "John", "lastname": "Doe"},
                    {"firstname": "Mary", "lastname": "Jane"},
                ]
            )
            for c in contacts:
                print({"contact": c.id, "lastname": c["lastname"], "account": c["parentcustomerid"]})

            log_call("recipes.create_and_delete_account('Quickstart Disposable')")
            print({"deleted": recipes.create_and_delete_account("Quickstart Disposable")})
        except RecordStoreError as e:
            print("Recipe failed:")
            traceback.print_exc()
            print(e.to_dict())
            sys.exit(1)

    print("\nDone. Records created by this run were left in place for inspection.")


if __name__ == "__main__":
    main()
