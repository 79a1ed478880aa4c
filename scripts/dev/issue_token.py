# scripts/dev/issue_token.py
"""
Mint a bearer token for an existing identity account (local development only).
Usage: python scripts/dev/issue_token.py admin@example.com
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import timedelta
from hoa_portal.config import settings
from hoa_portal.database import Database
from hoa_portal.services import identity_service
from hoa_portal.utils.security import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Issue a development JWT")
    parser.add_argument("email")
    parser.add_argument("--minutes", type=int, default=settings.DEV_TOKEN_EXPIRE_MINUTES)
    args = parser.parse_args()

    db = Database(settings.DATABASE_URL)
    session = db.session()
    try:
        account = identity_service.find_by_email(session, args.email)
        if account is None:
            print(f"❌ No account for {args.email}")
            sys.exit(1)
        token = create_access_token(
            account.id, account.role, settings,
            tenant_id=account.tenant_id,
            expires_delta=timedelta(minutes=args.minutes),
        )
    finally:
        session.close()
        db.dispose()

    print(token)


if __name__ == "__main__":
    main()
