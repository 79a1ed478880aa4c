# hoa_portal/services/permit_service.py
"""
Construction permit processing.

  action            legal from              result
  approve           pending, submitted      approved (road_fee_amount > 0)
  reject            pending, submitted      rejected (rejection_reason)
  mark_in_progress  approved                in_progress
  mark_paid         approved                status unchanged, road_fee_paid = True
  mark_completed    paid, in_progress       completed

road_fee_paid and status are independent: mark_paid only flips the flag,
and only once.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from hoa_portal.exceptions import InvalidTransition, ValidationError
from hoa_portal.models.construction_permit import ConstructionPermit
from hoa_portal.schemas.permit import PermitDecisionRequest
from hoa_portal.services.audit_service import record_audit
from hoa_portal.services.auth_guard import CallerContext
from hoa_portal.services.persistence import PersistenceGateway
from hoa_portal.utils.logger import get_logger

logger = get_logger(__name__)

# action -> (legal source statuses, resulting status; None keeps the current one)
PERMIT_TRANSITIONS = {
    "approve":          (("pending", "submitted"), "approved"),
    "reject":           (("pending", "submitted"), "rejected"),
    "mark_in_progress": (("approved",), "in_progress"),
    "mark_paid":        (("approved",), None),
    "mark_completed":   (("paid", "in_progress"), "completed"),
}

_TRANSITION_ERRORS = {
    "mark_in_progress": "Cannot mark as in progress. Permit must be approved first. Current status: {status}",
    "mark_paid": "Cannot mark as paid. Permit must be approved first. Current status: {status}",
    "mark_completed": "Cannot mark as completed. Permit must be paid or in progress. Current status: {status}",
}


@dataclass
class PermitTransition:
    action: str
    previous_status: str
    new_status: str
    expected_statuses: tuple
    updates: dict = field(default_factory=dict)
    unpaid_only: bool = False


def _check_dates(start: Optional[date], end: Optional[date]):
    if start and end and end < start:
        raise ValidationError("Project end date cannot be before the start date")


def plan_permit_transition(
    permit: ConstructionPermit,
    body: PermitDecisionRequest,
    actor_id: str,
    now: Optional[datetime] = None,
) -> PermitTransition:
    """Validate the action against the permit's status and compute the update. No I/O."""
    action = body.action
    if action not in PERMIT_TRANSITIONS:
        raise ValidationError(f"Invalid action: {action}")

    sources, target = PERMIT_TRANSITIONS[action]
    if permit.status not in sources:
        template = _TRANSITION_ERRORS.get(action, "Cannot {action} permit with status: {status}")
        message = template.format(action=action, status=permit.status)
        raise InvalidTransition(message, current_status=permit.status)

    now = now or datetime.utcnow()
    updates = {"updated_at": now}
    if target:
        updates["status"] = target

    if action == "approve":
        if body.road_fee_amount is None or body.road_fee_amount <= 0:
            raise ValidationError("Road fee is required for approval")
        _check_dates(body.start_date, permit.project_end_date)
        updates.update(
            road_fee_amount=Decimal(body.road_fee_amount),
            road_fee_paid=False,
            approved_by=actor_id,
            approved_at=now,
        )
        if body.start_date:
            updates["project_start_date"] = body.start_date

    elif action == "reject":
        reason = (body.rejection_reason or "").strip()
        if not reason:
            raise ValidationError("Rejection reason is required")
        updates["rejection_reason"] = reason

    elif action == "mark_in_progress":
        _check_dates(body.start_date, permit.project_end_date)
        if body.start_date:
            updates["project_start_date"] = body.start_date

    elif action == "mark_paid":
        if permit.road_fee_paid:
            raise InvalidTransition("Road fee has already been paid for this permit", current_status=permit.status)
        updates.update(road_fee_paid=True, road_fee_paid_at=now)
        if body.payment_reference:
            updates["payment_reference"] = body.payment_reference
        if body.payment_method:
            updates["payment_method"] = body.payment_method

    elif action == "mark_completed":
        _check_dates(permit.project_start_date, body.end_date)
        if body.end_date:
            updates["project_end_date"] = body.end_date

    return PermitTransition(
        action=action,
        previous_status=permit.status,
        new_status=target or permit.status,
        expected_statuses=sources,
        updates=updates,
        unpaid_only=(action == "mark_paid"),
    )


def apply_permit_transition(
    gateway: PersistenceGateway, permit_id: str, tenant_id: str, transition: PermitTransition
) -> ConstructionPermit:
    extra = (ConstructionPermit.road_fee_paid == False,) if transition.unpaid_only else ()  # noqa: E712
    return gateway.conditional_update(
        ConstructionPermit,
        permit_id,
        tenant_id,
        transition.expected_statuses,
        transition.updates,
        extra_conditions=extra,
        label="Permit",
    )


def process_permit(db: Session, caller: CallerContext, body: PermitDecisionRequest):
    """Fetch (tenant scoped) -> validate -> conditional write -> audit. Returns (permit, transition)."""
    gateway = PersistenceGateway(db)
    permit = gateway.fetch_scoped(ConstructionPermit, body.permit_id, caller.tenant_id, "Permit")

    transition = plan_permit_transition(permit, body, caller.caller_id)
    permit = apply_permit_transition(gateway, body.permit_id, caller.tenant_id, transition)
    logger.info(
        f"[PERMIT] {permit.id} {body.action}: {transition.previous_status} -> {transition.new_status} "
        f"paid={permit.road_fee_paid} by {caller.caller_id}"
    )

    record_audit(
        db,
        actor_id=caller.caller_id,
        action=f"permit_{transition.action}",
        resource_type="construction_permit",
        resource_id=permit.id,
        before_state={"status": transition.previous_status},
        after_state={
            "status": transition.new_status,
            "road_fee_amount": float(permit.road_fee_amount) if permit.road_fee_amount is not None else None,
            "road_fee_paid": permit.road_fee_paid,
        },
        tenant_id=caller.tenant_id,
    )
    return permit, transition
