# tests/test_notification_service.py
"""Unit tests for the notification outbox dispatcher."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import requests
from unittest.mock import MagicMock, patch
from hoa_portal.models.outbound_notification import OutboundNotification
from hoa_portal.services.notification_service import dispatch_pending, queue_email


def queue_one(db):
    n = queue_email(db, "new.admin@greenvalley-hoa.com", "admin_welcome",
                    {"first_name": "Ana", "temporary_password": "s3cret!Aa"})
    db.commit()
    return n


class TestDispatch:
    def test_no_webhook_leaves_rows_queued(self, db, settings):
        n = queue_one(db)
        with patch("hoa_portal.services.notification_service.requests.post") as post:
            counts = dispatch_pending(db, settings)
            post.assert_not_called()
        assert counts == {"sent": 0, "retrying": 0, "failed": 0}
        assert db.get(OutboundNotification, n.id).status == "queued"

    def test_successful_delivery(self, db, settings):
        settings = settings.model_copy(update={"MAIL_WEBHOOK_URL": "https://mail.internal/send"})
        n = queue_one(db)

        with patch("hoa_portal.services.notification_service.requests.post", return_value=MagicMock()) as post:
            counts = dispatch_pending(db, settings)

        assert counts["sent"] == 1
        sent_json = post.call_args.kwargs["json"]
        assert sent_json["to"] == "new.admin@greenvalley-hoa.com"
        assert sent_json["data"]["temporary_password"] == "s3cret!Aa"
        row = db.get(OutboundNotification, n.id)
        assert row.status == "sent"
        assert row.sent_at is not None
        assert row.attempts == 1

    def test_failures_retry_then_give_up(self, db, settings):
        settings = settings.model_copy(update={"MAIL_WEBHOOK_URL": "https://mail.internal/send", "MAIL_MAX_ATTEMPTS": 2})
        n = queue_one(db)

        with patch(
            "hoa_portal.services.notification_service.requests.post",
            side_effect=requests.exceptions.ConnectionError("unreachable"),
        ):
            first = dispatch_pending(db, settings)
            second = dispatch_pending(db, settings)
            third = dispatch_pending(db, settings)

        assert first["retrying"] == 1
        assert second["failed"] == 1
        assert third == {"sent": 0, "retrying": 0, "failed": 0}
        row = db.get(OutboundNotification, n.id)
        assert row.status == "failed"
        assert row.attempts == 2
        assert "unreachable" in row.last_error

    def test_sent_row_no_longer_holds_password(self, db, settings):
        settings = settings.model_copy(update={"MAIL_WEBHOOK_URL": "https://mail.internal/send"})
        n = queue_one(db)

        with patch("hoa_portal.services.notification_service.requests.post", return_value=MagicMock()):
            dispatch_pending(db, settings)

        db.expire_all()
        row = db.get(OutboundNotification, n.id)
        assert row.status == "sent"
        assert row.payload == {"first_name": "Ana"}

    def test_retrying_row_keeps_password_until_it_fails(self, db, settings):
        settings = settings.model_copy(update={"MAIL_WEBHOOK_URL": "https://mail.internal/send", "MAIL_MAX_ATTEMPTS": 2})
        n = queue_one(db)

        with patch(
            "hoa_portal.services.notification_service.requests.post",
            side_effect=requests.exceptions.Timeout("timed out"),
        ):
            dispatch_pending(db, settings)
            db.expire_all()
            assert db.get(OutboundNotification, n.id).payload["temporary_password"] == "s3cret!Aa"

            dispatch_pending(db, settings)

        db.expire_all()
        row = db.get(OutboundNotification, n.id)
        assert row.status == "failed"
        assert "temporary_password" not in row.payload
