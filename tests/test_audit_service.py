# tests/test_audit_service.py
"""Unit tests for the audit recorder."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from hoa_portal.models.audit_log import AuditLog
from hoa_portal.services.audit_service import list_audit_logs, record_audit


class TestRecordAudit:
    def test_appends_entry(self, db):
        entry = record_audit(db, "actor-1", "sticker_approve", "sticker", "stk-1",
                             {"status": "requested"}, {"status": "active"}, tenant_id="t1")
        assert entry is not None
        stored = db.query(AuditLog).one()
        assert stored.action == "sticker_approve"
        assert stored.before_state == {"status": "requested"}
        assert stored.created_at is not None

    def test_write_failure_is_swallowed(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))

        assert record_audit(db, "actor-1", "permit_reject", "construction_permit", "p-1") is None
        db.rollback.assert_called_once()


class TestListAuditLogs:
    def test_filters_and_scopes(self, db):
        record_audit(db, "a", "sticker_approve", "sticker", "s-1", tenant_id="t1")
        record_audit(db, "a", "permit_approve", "construction_permit", "p-1", tenant_id="t1")
        record_audit(db, "b", "sticker_reject", "sticker", "s-2", tenant_id="t2")

        assert len(list_audit_logs(db)) == 3
        assert len(list_audit_logs(db, tenant_id="t1")) == 2
        assert [e.resource_id for e in list_audit_logs(db, tenant_id="t1", resource_type="sticker")] == ["s-1"]
        assert len(list_audit_logs(db, resource_id="s-2")) == 1
        assert len(list_audit_logs(db, limit=1)) == 1
