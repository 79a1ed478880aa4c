# scripts/ops/dispatch_notifications.py
"""
Deliver queued outbound emails (welcome mails, password resets) once.
Schedule with cron or a systemd timer, e.g. every minute.
Usage: python scripts/ops/dispatch_notifications.py --limit 100
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from hoa_portal.config import settings
from hoa_portal.database import Database
from hoa_portal.services.notification_service import dispatch_pending


def main():
    parser = argparse.ArgumentParser(description="Dispatch queued notifications")
    parser.add_argument("--limit", type=int, default=50)
    args = parser.parse_args()

    db = Database(settings.DATABASE_URL)
    session = db.session()
    try:
        counts = dispatch_pending(session, settings, limit=args.limit)
    finally:
        session.close()
        db.dispose()

    print(f"📬 sent={counts['sent']} retrying={counts['retrying']} failed={counts['failed']}")


if __name__ == "__main__":
    main()
