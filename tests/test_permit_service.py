# tests/test_permit_service.py
"""Unit tests for construction permit processing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pydantic
import pytest
from datetime import date
from decimal import Decimal
from hoa_portal.exceptions import InvalidTransition, NotFound, StaleState, ValidationError
from hoa_portal.models.audit_log import AuditLog
from hoa_portal.models.construction_permit import PERMIT_STATUSES, ConstructionPermit
from hoa_portal.schemas.permit import PermitDecisionRequest
from hoa_portal.services.permit_service import (
    apply_permit_transition,
    plan_permit_transition,
    process_permit,
)
from hoa_portal.services.persistence import PersistenceGateway


def request(permit, action, **kwargs):
    return PermitDecisionRequest(permit_id=permit.id, action=action, **kwargs)


class TestPermitApproval:
    def test_pending_permit_approved_with_road_fee(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")

        updated, transition = process_permit(db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount=5000))

        assert updated.status == "approved"
        assert updated.road_fee_amount == Decimal("5000")
        assert updated.road_fee_paid is False
        assert updated.approved_by == seed.head_a.id
        assert transition.new_status == "approved"

    def test_approve_sets_start_date(self, db, seed, make_permit, caller_for):
        permit = make_permit("submitted")
        updated, _ = process_permit(
            db, caller_for(seed.head_a),
            request(permit, "approve", road_fee_amount=1200, start_date="2026-03-01"),
        )
        assert updated.project_start_date == date(2026, 3, 1)

    @pytest.mark.parametrize("fee", [None, 0, -50])
    def test_approve_requires_positive_fee(self, db, seed, make_permit, caller_for, fee):
        permit = make_permit("pending")
        with pytest.raises(ValidationError):
            process_permit(db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount=fee))

        db.expire_all()
        row = db.get(ConstructionPermit, permit.id)
        assert row.status == "pending"
        assert row.road_fee_amount is None

    @pytest.mark.parametrize("fee", ["123456789012345.678", "12345678901.23", "1500.555"])
    def test_fee_outside_column_precision_is_refused(self, fee):
        with pytest.raises(pydantic.ValidationError):
            PermitDecisionRequest(permit_id="p-1", action="approve", road_fee_amount=fee)

    def test_fee_at_column_precision_is_stored_exactly(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")
        updated, _ = process_permit(
            db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount="9999999999.99")
        )
        assert updated.road_fee_amount == Decimal("9999999999.99")

    @pytest.mark.parametrize("status", ["approved", "rejected", "in_progress", "paid", "completed"])
    def test_approve_from_other_states_fails(self, db, seed, make_permit, caller_for, status):
        permit = make_permit(status)
        with pytest.raises(InvalidTransition) as exc:
            process_permit(db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount=5000))
        assert exc.value.current_status == status

    def test_reject_requires_reason(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")
        with pytest.raises(ValidationError):
            process_permit(db, caller_for(seed.officer_a), request(permit, "reject"))

    def test_reject_with_reason(self, db, seed, make_permit, caller_for):
        permit = make_permit("submitted")
        updated, _ = process_permit(
            db, caller_for(seed.officer_a), request(permit, "reject", rejection_reason="Missing structural plans")
        )
        assert updated.status == "rejected"
        assert updated.rejection_reason == "Missing structural plans"


class TestRoadFeePayment:
    def test_mark_paid_keeps_status(self, db, seed, make_permit, caller_for):
        permit = make_permit("approved", road_fee_amount=Decimal("5000"), road_fee_paid=False)

        updated, transition = process_permit(
            db, caller_for(seed.officer_a),
            request(permit, "mark_paid", payment_reference="OR-2026-0042", payment_method="gcash"),
        )

        assert updated.road_fee_paid is True
        assert updated.status == "approved"
        assert updated.road_fee_paid_at is not None
        assert updated.payment_reference == "OR-2026-0042"
        assert updated.payment_method == "gcash"
        assert transition.new_status == "approved"

    @pytest.mark.parametrize("status", [s for s in PERMIT_STATUSES if s != "approved"])
    def test_mark_paid_only_from_approved(self, db, seed, make_permit, caller_for, status):
        permit = make_permit(status)
        with pytest.raises(InvalidTransition):
            process_permit(db, caller_for(seed.officer_a), request(permit, "mark_paid"))
        db.expire_all()
        assert db.get(ConstructionPermit, permit.id).road_fee_paid is False

    def test_mark_paid_twice_fails(self, db, seed, make_permit, caller_for):
        permit = make_permit("approved", road_fee_amount=Decimal("5000"))
        process_permit(db, caller_for(seed.officer_a), request(permit, "mark_paid"))
        with pytest.raises(InvalidTransition):
            process_permit(db, caller_for(seed.officer_a), request(permit, "mark_paid"))

    def test_concurrent_mark_paid_is_stale(self, db, seed, make_permit):
        permit = make_permit("approved", road_fee_amount=Decimal("5000"))
        gateway = PersistenceGateway(db)
        body = request(permit, "mark_paid")

        first = plan_permit_transition(permit, body, seed.officer_a.id)
        second = plan_permit_transition(permit, body, seed.head_a.id)
        apply_permit_transition(gateway, permit.id, seed.green.id, first)

        with pytest.raises(StaleState) as exc:
            apply_permit_transition(gateway, permit.id, seed.green.id, second)
        assert exc.value.current_status == "approved"


class TestPermitProgress:
    def test_mark_in_progress_from_approved(self, db, seed, make_permit, caller_for):
        permit = make_permit("approved", road_fee_amount=Decimal("800"))
        updated, _ = process_permit(
            db, caller_for(seed.officer_a), request(permit, "mark_in_progress", start_date="2026-04-01")
        )
        assert updated.status == "in_progress"
        assert updated.project_start_date == date(2026, 4, 1)

    def test_mark_in_progress_requires_approval(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")
        with pytest.raises(InvalidTransition) as exc:
            process_permit(db, caller_for(seed.officer_a), request(permit, "mark_in_progress"))
        assert exc.value.current_status == "pending"
        assert "Current status: pending" in exc.value.message

    @pytest.mark.parametrize("status", ["paid", "in_progress"])
    def test_mark_completed_from_allowed_states(self, db, seed, make_permit, caller_for, status):
        permit = make_permit(status, project_start_date=date(2026, 4, 1))
        updated, _ = process_permit(
            db, caller_for(seed.officer_a), request(permit, "mark_completed", end_date="2026-08-15")
        )
        assert updated.status == "completed"
        assert updated.project_end_date == date(2026, 8, 15)

    @pytest.mark.parametrize("status", ["pending", "submitted", "approved", "rejected", "completed"])
    def test_mark_completed_from_other_states_fails(self, db, seed, make_permit, caller_for, status):
        permit = make_permit(status)
        with pytest.raises(InvalidTransition):
            process_permit(db, caller_for(seed.officer_a), request(permit, "mark_completed"))
        db.expire_all()
        assert db.get(ConstructionPermit, permit.id).status == status

    def test_end_date_before_start_date(self, db, seed, make_permit, caller_for):
        permit = make_permit("in_progress", project_start_date=date(2026, 4, 1))
        with pytest.raises(ValidationError):
            process_permit(db, caller_for(seed.officer_a), request(permit, "mark_completed", end_date="2026-03-01"))


class TestPermitScoping:
    def test_unknown_action(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")
        with pytest.raises(ValidationError):
            process_permit(db, caller_for(seed.officer_a), request(permit, "archive"))

    def test_other_tenant_permit_not_found(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending", tenant=seed.lake)
        with pytest.raises(NotFound):
            process_permit(db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount=5000))

    def test_transition_is_audited(self, db, seed, make_permit, caller_for):
        permit = make_permit("pending")
        process_permit(db, caller_for(seed.head_a), request(permit, "approve", road_fee_amount=5000))

        entry = db.query(AuditLog).one()
        assert entry.action == "permit_approve"
        assert entry.resource_type == "construction_permit"
        assert entry.before_state == {"status": "pending"}
        assert entry.after_state == {"status": "approved", "road_fee_amount": 5000.0, "road_fee_paid": False}
