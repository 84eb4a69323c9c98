#!/usr/bin/env python3
"""
Recompute every nurse listing's rating from its rated appointments.

Run after an interrupted rating write, or any time the stored aggregate is
suspected to have drifted from the appointment ledger.
"""
import sys

from dotenv import load_dotenv
from sqlmodel import Session

load_dotenv()

from wecare.database import create_db_and_tables, engine
from wecare.application.services.nurse_directory_service import NurseDirectoryService
from wecare.infrastructure.persistence.sqlalchemy.repositories.nurse_repository_sql import SqlNurseRepository


def reconcile() -> dict:
    create_db_and_tables()
    with Session(engine) as session:
        return NurseDirectoryService(nurse_repo=SqlNurseRepository(session)).reconcile_ratings()


if __name__ == "__main__":
    try:
        updated = reconcile()
    except Exception as e:
        print(f"Reconciliation failed: {e}")
        sys.exit(1)
    for listing_id, rating in sorted(updated.items()):
        print(f"{listing_id}: {rating}")
    print(f"Reconciled {len(updated)} nurse listings")
