# hoa_portal/services/notification_service.py
"""
Notification outbox.

queue_email() adds a row in the caller's transaction, so a message exists
only if the change that produced it committed. dispatch_pending() delivers
queued rows to the mail webhook and records the outcome per row.

Secrets (temporary passwords) travel only inside the payload of a queued
row; they are never logged, never returned to API callers, and are
removed from the payload once the row is sent or has failed for good.
"""

from datetime import datetime

import requests
from sqlalchemy.orm import Session

from hoa_portal.config import Settings
from hoa_portal.models.outbound_notification import OutboundNotification
from hoa_portal.utils.logger import get_logger

logger = get_logger(__name__)

TEMPLATE_ADMIN_WELCOME = "admin_welcome"
TEMPLATE_ADMIN_PASSWORD_RESET = "admin_password_reset"

# Payload keys dropped once a row is sent or has failed for good
SECRET_PAYLOAD_KEYS = ("temporary_password",)


def queue_email(db: Session, recipient: str, template: str, payload: dict) -> OutboundNotification:
    """Add a queued email to the session. Does not commit."""
    notification = OutboundNotification(
        channel="email",
        recipient=recipient,
        template=template,
        payload=dict(payload),
        status="queued",
        attempts=0,
    )
    db.add(notification)
    logger.info(f"[OUTBOX] Queued {template} email for {recipient}")
    return notification


def _scrub_secrets(notification: OutboundNotification):
    payload = notification.payload or {}
    notification.payload = {k: v for k, v in payload.items() if k not in SECRET_PAYLOAD_KEYS}


def dispatch_pending(db: Session, settings: Settings, limit: int = 50) -> dict:
    """
    Deliver up to `limit` queued emails. Returns counts per outcome.
    Rows that fail stay queued until MAIL_MAX_ATTEMPTS, then become failed.
    """
    counts = {"sent": 0, "retrying": 0, "failed": 0}
    if not settings.MAIL_WEBHOOK_URL:
        logger.info("[OUTBOX] MAIL_WEBHOOK_URL not set, leaving notifications queued")
        return counts

    pending = (
        db.query(OutboundNotification)
        .filter(OutboundNotification.status == "queued")
        .order_by(OutboundNotification.created_at)
        .limit(limit)
        .all()
    )

    headers = {"Content-Type": "application/json"}
    if settings.MAIL_WEBHOOK_TOKEN:
        headers["Authorization"] = f"Bearer {settings.MAIL_WEBHOOK_TOKEN}"

    for notification in pending:
        notification.attempts += 1
        try:
            resp = requests.post(
                settings.MAIL_WEBHOOK_URL,
                json={
                    "from": settings.MAIL_FROM,
                    "to": notification.recipient,
                    "template": notification.template,
                    "data": notification.payload,
                },
                headers=headers,
                timeout=settings.MAIL_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            notification.last_error = str(e)[:500]
            if notification.attempts >= settings.MAIL_MAX_ATTEMPTS:
                notification.status = "failed"
                _scrub_secrets(notification)
                counts["failed"] += 1
                logger.error(f"[OUTBOX] Giving up on {notification.id} after {notification.attempts} attempts: {e}")
            else:
                counts["retrying"] += 1
                logger.warning(f"[OUTBOX] Delivery of {notification.id} failed (attempt {notification.attempts}): {e}")
        else:
            notification.status = "sent"
            notification.sent_at = datetime.utcnow()
            notification.last_error = None
            _scrub_secrets(notification)
            counts["sent"] += 1
        db.commit()

    if pending:
        logger.info(f"[OUTBOX] Dispatch pass: {counts}")
    return counts
