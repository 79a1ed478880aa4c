# hoa_portal/routers/audit_logs.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from hoa_portal.database import get_db
from hoa_portal.schemas.audit_log import AuditLogOut
from hoa_portal.services.audit_service import list_audit_logs
from hoa_portal.services.auth_guard import ADMIN_HEAD, SUPERADMIN, AuthorizationGuard, CallerContext, require_roles

router = APIRouter()


@router.get("/audit-logs", summary="Audit trail, newest first, filterable by resource")
def get_audit_logs(
    request: Request,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
    limit: int = Query(50, ge=1),
    caller: CallerContext = Depends(require_roles(SUPERADMIN, ADMIN_HEAD)),
    db: Session = Depends(get_db),
):
    """admin_head always sees its own community; superadmin may filter by tenant_id or see all."""
    if tenant_id:
        AuthorizationGuard.ensure_tenant(caller, tenant_id)
    scope = tenant_id if caller.is_superadmin else caller.tenant_id
    limit = min(limit, request.app.state.settings.AUDIT_LOG_MAX_LIMIT)
    entries = list_audit_logs(db, scope, resource_type, resource_id, limit)
    return {
        "success": True,
        "data": [AuditLogOut.model_validate(e).model_dump(mode="json") for e in entries],
    }
