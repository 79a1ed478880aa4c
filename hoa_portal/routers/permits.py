# hoa_portal/routers/permits.py
"""Construction permit processing endpoint, called from the admin dashboard."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hoa_portal.database import get_db
from hoa_portal.schemas.permit import PermitDecisionOut, PermitDecisionRequest
from hoa_portal.services.auth_guard import TENANT_ADMIN_ROLES, CallerContext, require_roles
from hoa_portal.services.permit_service import process_permit
from hoa_portal.routers.preflight import preflight_ok

router = APIRouter()

router.add_api_route("/process-construction-permit", preflight_ok, methods=["OPTIONS"], include_in_schema=False)


@router.post("/process-construction-permit", summary="Approve, reject or progress a construction permit")
def process_construction_permit(
    body: PermitDecisionRequest,
    caller: CallerContext = Depends(require_roles(*TENANT_ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    permit, transition = process_permit(db, caller, body)
    data = PermitDecisionOut(
        permit_id=permit.id,
        new_status=transition.new_status,
        road_fee_amount=float(permit.road_fee_amount) if permit.road_fee_amount is not None else None,
        road_fee_paid=bool(permit.road_fee_paid),
        road_fee_paid_at=permit.road_fee_paid_at,
        payment_reference=permit.payment_reference,
        payment_method=permit.payment_method,
        approved_by=permit.approved_by,
        approved_at=permit.approved_at,
        rejection_reason=permit.rejection_reason,
        project_start_date=permit.project_start_date,
        project_end_date=permit.project_end_date,
    )
    return {
        "success": True,
        "message": f"Permit {transition.action} processed successfully",
        "data": data.model_dump(mode="json", exclude_none=True),
    }
