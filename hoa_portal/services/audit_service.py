# hoa_portal/services/audit_service.py
"""
Audit recorder.
Appends one audit_logs row per privileged mutation, after the mutation has
committed. Best effort: a failed audit write is logged and swallowed so it
never turns a successful mutation into an error response.
"""

from typing import Optional
from sqlalchemy.orm import Session
from hoa_portal.models.audit_log import AuditLog
from hoa_portal.utils.logger import get_logger

logger = get_logger(__name__)


def record_audit(
    db: Session,
    actor_id: str,
    action: str,
    resource_type: str,
    resource_id: str,
    before_state: Optional[dict] = None,
    after_state: Optional[dict] = None,
    tenant_id: Optional[str] = None,
) -> Optional[AuditLog]:
    try:
        entry = AuditLog(
            actor_id=actor_id,
            tenant_id=tenant_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            before_state=before_state,
            after_state=after_state,
        )
        db.add(entry)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(
            f"[AUDIT] Failed to record {action} on {resource_type}:{resource_id} by {actor_id}: {e}",
            exc_info=True,
        )
        return None
    logger.info(f"[AUDIT] {action} {resource_type}:{resource_id} by {actor_id}")
    return entry


def list_audit_logs(db: Session, tenant_id=None, resource_type=None, resource_id=None, limit=50):
    """Newest first. tenant_id=None means all tenants (superadmin only)."""
    q = db.query(AuditLog)
    if tenant_id:
        q = q.filter(AuditLog.tenant_id == tenant_id)
    if resource_type:
        q = q.filter(AuditLog.resource_type == resource_type)
    if resource_id:
        q = q.filter(AuditLog.resource_id == resource_id)
    return q.order_by(AuditLog.created_at.desc()).limit(limit).all()
