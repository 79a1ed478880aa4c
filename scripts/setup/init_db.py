# scripts/setup/init_db.py
"""
Initialize database: creates all tables, optionally seeds a community and a superadmin.
Run once before first launch, or after adding new models.
Usage:
    python scripts/setup/init_db.py
    python scripts/setup/init_db.py --community "Green Valley HOA" --superadmin ops@example.com
"""

import argparse
import getpass
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from hoa_portal.database import Database
from hoa_portal.config import settings
from hoa_portal.models.community import Community
from hoa_portal.services import identity_service
from sqlalchemy import inspect


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed initial records")
    parser.add_argument("--community", help="Create a community with this name")
    parser.add_argument("--superadmin", help="Create a superadmin account with this email")
    args = parser.parse_args()

    print("🗄️  HOA Portal DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    db = Database(settings.DATABASE_URL)

    # Test connection
    try:
        db.ping()
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    # Create all tables
    print("\n📋 Creating tables...")
    db.create_tables()
    tables = sorted(inspect(db.engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    session = db.session()
    try:
        if args.community:
            community = Community(name=args.community, status="active")
            session.add(community)
            session.commit()
            print(f"\n🏘️  Community created: {community.name} ({community.id})")

        if args.superadmin:
            if identity_service.find_by_email(session, args.superadmin):
                print(f"\n⚠️  {args.superadmin} already exists, skipped")
            else:
                password = getpass.getpass(f"Password for {args.superadmin}: ")
                account = identity_service.create_account(
                    session,
                    args.superadmin,
                    password,
                    app_metadata={"role": "superadmin", "tenant_id": None},
                    user_metadata={},
                    rounds=settings.BCRYPT_ROUNDS,
                )
                account.must_change_password = False
                session.commit()
                print(f"\n🔑 Superadmin created: {account.email} ({account.id})")
    finally:
        session.close()
        db.dispose()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn hoa_portal.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
