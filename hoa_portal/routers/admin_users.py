# hoa_portal/routers/admin_users.py
"""
Admin account endpoints, called from the platform dashboard (superadmin)
and from the admin dashboard (admin_head creating officers).
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from hoa_portal.database import get_db
from hoa_portal.schemas.admin_user import AdminCreateRequest, AdminCreatedOut, PasswordResetOut, PasswordResetRequest
from hoa_portal.services.admin_service import create_admin, reset_admin_password
from hoa_portal.services.auth_guard import ADMIN_HEAD, SUPERADMIN, CallerContext, require_roles
from hoa_portal.routers.preflight import preflight_ok

router = APIRouter()

router.add_api_route("/create-community-admin", preflight_ok, methods=["OPTIONS"], include_in_schema=False)
router.add_api_route("/reset-admin-password", preflight_ok, methods=["OPTIONS"], include_in_schema=False)


@router.post("/create-community-admin", status_code=status.HTTP_201_CREATED, summary="Provision a community admin")
def create_community_admin(
    body: AdminCreateRequest,
    request: Request,
    caller: CallerContext = Depends(require_roles(SUPERADMIN, ADMIN_HEAD)),
    db: Session = Depends(get_db),
):
    """
    Creates the login and the admin record. The temporary password is
    emailed through the outbox; the response only confirms it was queued.
    """
    result = create_admin(db, caller, body, request.app.state.settings)
    data = AdminCreatedOut(
        id=result.admin.id,
        email=result.email,
        first_name=result.admin.first_name,
        last_name=result.admin.last_name,
        role=result.admin.role,
        tenant_id=result.admin.tenant_id,
        tenant_name=result.tenant_name,
    )
    return {
        "success": True,
        "message": f"Admin user created successfully for {result.tenant_name}. Welcome email queued.",
        "data": data.model_dump(mode="json"),
    }


@router.post("/reset-admin-password", summary="Issue a new temporary password to an admin")
def reset_password(
    body: PasswordResetRequest,
    request: Request,
    caller: CallerContext = Depends(require_roles(SUPERADMIN)),
    db: Session = Depends(get_db),
):
    admin, email = reset_admin_password(db, caller, body, request.app.state.settings)
    return {
        "success": True,
        "message": f"Temporary password generated for {email} and queued for email delivery.",
        "data": PasswordResetOut(user_id=admin.id, email=email).model_dump(mode="json"),
    }
