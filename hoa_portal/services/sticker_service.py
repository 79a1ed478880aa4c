# hoa_portal/services/sticker_service.py
"""
Vehicle sticker decisions (approve / reject).

State machine:
  requested | pending --approve--> active    (expiry_date required)
  requested | pending --reject---> rejected  (rejection_reason required)
Every other source status is an InvalidTransition.

On approval the sticker gets a versioned code payload binding sticker id,
plate, expiry and household, which the gate scanner verifies.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from hoa_portal.config import Settings
from hoa_portal.exceptions import InvalidTransition, ValidationError
from hoa_portal.models.vehicle_sticker import VehicleSticker
from hoa_portal.schemas.sticker import StickerDecisionRequest
from hoa_portal.services.audit_service import record_audit
from hoa_portal.services.auth_guard import CallerContext
from hoa_portal.services.persistence import PersistenceGateway
from hoa_portal.utils.logger import get_logger

logger = get_logger(__name__)

STICKER_ACTIONS = ("approve", "reject")
DECIDABLE_STATUSES = ("requested", "pending")
RESULT_STATUS = {"approve": "active", "reject": "rejected"}


@dataclass
class StickerTransition:
    action: str
    previous_status: str
    new_status: str
    expected_statuses: tuple
    updates: dict = field(default_factory=dict)


def build_sticker_code(sticker: VehicleSticker, expiry_date: date, version: int = 1) -> str:
    payload = {
        "id": sticker.id,
        "plate": sticker.vehicle_plate,
        "expiry": expiry_date.isoformat(),
        "household": sticker.household_id,
        "v": version,
    }
    return json.dumps(payload, separators=(",", ":"))


def plan_sticker_transition(
    sticker: VehicleSticker,
    action: str,
    actor_id: str,
    expiry_date: Optional[date] = None,
    rejection_reason: Optional[str] = None,
    now: Optional[datetime] = None,
    code_version: int = 1,
) -> StickerTransition:
    """Validate the action against the sticker's status and compute the update. No I/O."""
    if action not in STICKER_ACTIONS:
        raise ValidationError("Invalid action. Must be approve or reject")

    if sticker.status not in DECIDABLE_STATUSES:
        raise InvalidTransition(
            f"Cannot {action} sticker with status: {sticker.status}. "
            f"Only requested or pending stickers can be approved/rejected.",
            current_status=sticker.status,
        )

    now = now or datetime.utcnow()
    updates = {"status": RESULT_STATUS[action], "updated_at": now}

    if action == "approve":
        if not expiry_date:
            raise ValidationError("Expiry date is required for approval")
        updates.update(
            expiry_date=expiry_date,
            approved_by=actor_id,
            approved_at=now,
            rejection_reason=None,
            rfid_code=build_sticker_code(sticker, expiry_date, code_version),
        )
    else:
        reason = (rejection_reason or "").strip()
        if not reason:
            raise ValidationError("Rejection reason is required")
        updates.update(rejection_reason=reason, expiry_date=None)

    return StickerTransition(
        action=action,
        previous_status=sticker.status,
        new_status=RESULT_STATUS[action],
        expected_statuses=DECIDABLE_STATUSES,
        updates=updates,
    )


def apply_sticker_transition(
    gateway: PersistenceGateway, sticker_id: str, tenant_id: str, transition: StickerTransition
) -> VehicleSticker:
    return gateway.conditional_update(
        VehicleSticker,
        sticker_id,
        tenant_id,
        transition.expected_statuses,
        transition.updates,
        label="Sticker",
    )


def decide_sticker(db: Session, caller: CallerContext, body: StickerDecisionRequest, settings: Settings):
    """Fetch (tenant scoped) -> validate -> conditional write -> audit. Returns (sticker, transition)."""
    gateway = PersistenceGateway(db)
    sticker = gateway.fetch_scoped(VehicleSticker, body.sticker_id, caller.tenant_id, "Sticker")

    transition = plan_sticker_transition(
        sticker,
        body.action,
        caller.caller_id,
        expiry_date=body.expiry_date,
        rejection_reason=body.rejection_reason,
        code_version=settings.STICKER_CODE_VERSION,
    )
    sticker = apply_sticker_transition(gateway, body.sticker_id, caller.tenant_id, transition)
    logger.info(
        f"[STICKER] {sticker.id} plate={sticker.vehicle_plate} "
        f"{transition.previous_status} -> {transition.new_status} by {caller.caller_id}"
    )

    record_audit(
        db,
        actor_id=caller.caller_id,
        action=f"sticker_{transition.action}",
        resource_type="sticker",
        resource_id=sticker.id,
        before_state={"status": transition.previous_status},
        after_state={
            "status": transition.new_status,
            "expiry_date": sticker.expiry_date.isoformat() if sticker.expiry_date else None,
            "rejection_reason": sticker.rejection_reason,
        },
        tenant_id=caller.tenant_id,
    )
    return sticker, transition
