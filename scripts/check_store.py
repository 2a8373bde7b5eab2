#!/usr/bin/env python3
"""
Record Store Check Script

Verifies the configured database is reachable, creates missing tables and
prints how many users and messages it holds.

Usage: python scripts/check_store.py
"""
import asyncio
import sys
sys.path.insert(0, '.')

from alumni_connect.core.config import get_settings
from alumni_connect.db.database import init_db
from alumni_connect.db.record_store import get_record_store
from alumni_connect.db.tables import messages, users


async def main():
    settings = get_settings()
    store = get_record_store()
    print("=" * 50)
    print("ALUMNI CONNECT - RECORD STORE CHECK")
    print("=" * 50)

    print("\n[1] Testing database...")
    print(f"    URL: {store.engine.url.render_as_string(hide_password=True)}")
    print(f"    Timeout: {settings.store_timeout_seconds}s")
    if not await store.ping():
        print("    ❌ Database: FAILED")
        return 1
    print("    ✅ Database: CONNECTED")

    print("\n[2] Creating tables...")
    init_db(store.engine)
    print("    ✅ Tables ready")

    print("\n[3] Counting rows...")
    for role in ("student", "alumni", "admin"):
        n = await store.count(users, users.c.role == role)
        print(f"    {role:<8} {n}")
    total = await store.count(messages)
    unread = await store.count(messages, messages.c.is_read.is_(False))
    print(f"    messages {total} ({unread} unread)")

    print("\n" + "=" * 50)
    print("Store check complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
