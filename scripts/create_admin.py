#!/usr/bin/env python3
"""
Bootstrap Script
================
Creates the database tables (if missing), an ADMIN account and, optionally,
the province reference rows companies register against.

Usage:
    python scripts/create_admin.py --email admin@jobboard.vn --password 'Admin@123'
    python scripts/create_admin.py --email admin@jobboard.vn --password 'Admin@123' \
        --provinces "Ha Noi,Ho Chi Minh,Da Nang"
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv
from sqlalchemy import select

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from jobboard.core.constants import Role  # noqa: E402
from jobboard.core.security import get_password_hash  # noqa: E402
from jobboard.db.session import create_database  # noqa: E402
from jobboard.models import Account, Province  # noqa: E402


async def bootstrap(email: str, password: str, provinces: list) -> None:
    database = create_database(echo=False)
    try:
        await database.create_all()

        async with database.session_factory() as session:
            existing = (await session.execute(select(Account).where(Account.email == email))).scalar_one_or_none()
            if existing:
                print(f"ℹ️  Account {email} already exists (role={existing.role})")
            else:
                session.add(Account(email=email, password_hash=get_password_hash(password), role=Role.ADMIN.value))
                print(f"✅ Created admin {email}")

            known = set((await session.execute(select(Province.name))).scalars().all())
            added = [name for name in provinces if name not in known]
            session.add_all(Province(name=name) for name in added)
            if added:
                print(f"✅ Added {len(added)} provinces")

            await session.commit()
    finally:
        await database.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create an admin account and seed provinces")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--provinces", default="", help="Comma-separated province names")
    args = parser.parse_args()

    provinces = [name.strip() for name in args.provinces.split(",") if name.strip()]
    asyncio.run(bootstrap(args.email.strip(), args.password, provinces))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
