# hoa_portal/routers/stickers.py
"""Vehicle sticker approval endpoint, called from the admin dashboard."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from hoa_portal.database import get_db
from hoa_portal.schemas.sticker import StickerDecisionOut, StickerDecisionRequest
from hoa_portal.services.auth_guard import TENANT_ADMIN_ROLES, CallerContext, require_roles
from hoa_portal.services.sticker_service import decide_sticker
from hoa_portal.routers.preflight import preflight_ok

router = APIRouter()

router.add_api_route("/approve-sticker", preflight_ok, methods=["OPTIONS"], include_in_schema=False)


@router.post("/approve-sticker", summary="Approve or reject a vehicle sticker request")
def approve_sticker(
    body: StickerDecisionRequest,
    request: Request,
    caller: CallerContext = Depends(require_roles(*TENANT_ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    sticker, transition = decide_sticker(db, caller, body, request.app.state.settings)
    data = StickerDecisionOut(
        sticker_id=sticker.id,
        new_status=transition.new_status,
        expiry_date=sticker.expiry_date,
        approved_by=sticker.approved_by,
        approved_at=sticker.approved_at,
        rfid_code=sticker.rfid_code,
        rejection_reason=sticker.rejection_reason,
    )
    return {
        "success": True,
        "message": f"Sticker {transition.action}d successfully",
        "data": data.model_dump(mode="json", exclude_none=True),
    }
