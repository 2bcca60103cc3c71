#!/usr/bin/env python3
"""Populate profile_key for profiles stored before keys were persisted.

Rows whose derived key is already used get the next numbered key
(jane-doe-2, jane-doe-3, ...), the same way new profiles do.

Usage:
    python scripts/backfill_profile_keys.py [--dry-run]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import from src
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import get_settings
from src.core.supabase import get_supabase_client
from src.services.profile_keys import candidate_keys, derive_key


def main() -> None:
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Backfill missing profile keys")
    parser.add_argument("--dry-run", action="store_true", help="Report changes without writing")
    args = parser.parse_args()

    table = get_settings().profiles_table

    try:
        client = get_supabase_client()
    except Exception as e:
        print(f"❌ Error: Failed to initialize Supabase client: {e}")
        sys.exit(1)

    print("📋 Fetching profiles...")
    try:
        rows = client.table(table).select("id, username, profile_key").execute().data or []
    except Exception as e:
        print(f"❌ Error: Failed to fetch profiles: {e}")
        sys.exit(1)

    taken = {row["profile_key"] for row in rows if row.get("profile_key")}
    missing = [row for row in rows if not row.get("profile_key")]
    print(f"✓ Found {len(rows)} profiles, {len(missing)} without a key\n")

    updated = 0
    numbered = 0
    for row in missing:
        key = next(k for k in candidate_keys(row["username"]) if k not in taken)
        if key != derive_key(row["username"]):
            numbered += 1

        taken.add(key)
        if args.dry_run:
            print(f"   would set {row['username']!r} -> {key}")
        else:
            client.table(table).update({"profile_key": key}).eq("id", row["id"]).execute()
            print(f"   ✓ {row['username']!r} -> {key}")
        updated += 1

    print(f"\n📊 Summary:")
    print(f"   Keys {'to write' if args.dry_run else 'written'}: {updated}")
    print(f"   Numbered keys: {numbered}")


if __name__ == "__main__":
    main()
