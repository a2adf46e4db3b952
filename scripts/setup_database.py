#!/usr/bin/env python3
"""
Provision the records database and load sample data.

Creates tables and unique indexes, then seeds the default admin, two sample
officers and two sample cases. Safe to run repeatedly; existing records are
left alone.

Usage:
    python scripts/setup_database.py            # create + seed
    python scripts/setup_database.py --reset    # drop everything first
    python scripts/setup_database.py --check    # only test the connection
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rms.config import settings
from rms.db import Base, build_engine
from rms.logging import mask_url, setup_logging
from rms.models import models  # noqa: F401  registers the tables on Base.metadata
from rms.storage.database_provider import DatabaseStorage
from rms.storage.fixtures import SAMPLE_CASES, SAMPLE_OFFICERS


def reset_tables(database_url: str) -> None:
    engine = build_engine(database_url)
    try:
        Base.metadata.drop_all(bind=engine)
    finally:
        engine.dispose()
    print("[RESET] Dropped all tables")


def seed(storage: DatabaseStorage) -> int:
    created = 0
    admin = storage.get_user_by_username(settings.admin_username)

    for officer in SAMPLE_OFFICERS:
        if storage.get_user_by_username(officer["username"]):
            print(f"[SKIP] User {officer['username']} already exists")
            continue
        storage.create_user(officer)
        created += 1
        print(f"[SEED] Created user {officer['username']}")

    existing_titles = {c["title"] for c in storage.get_cases()}
    for case in SAMPLE_CASES[:2]:
        if case["title"] in existing_titles:
            print(f"[SKIP] Case '{case['title']}' already exists")
            continue
        record = storage.create_case({**case, "created_by_id": admin["id"] if admin else None})
        created += 1
        print(f"[SEED] Created case {record['case_number']}")

    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Create tables and seed sample records")
    parser.add_argument("--database-url", default=settings.database_url, help="Defaults to DATABASE_URL")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    parser.add_argument("--check", action="store_true", help="Only test the connection")
    args = parser.parse_args()

    setup_logging()
    print(f"[INFO] Database: {mask_url(args.database_url)}")

    if args.reset and not args.check:
        reset_tables(args.database_url)

    storage = DatabaseStorage()
    if not storage.connect(args.database_url):
        print("[ERROR] Could not connect to the database")
        return 1

    try:
        if args.check:
            print("[OK] Connection successful")
            return 0
        created = seed(storage)
        print(f"\n[SUCCESS] Database ready, {created} record(s) created")
        return 0
    finally:
        storage.disconnect()


if __name__ == "__main__":
    sys.exit(main())
