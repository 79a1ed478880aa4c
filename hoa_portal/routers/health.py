# hoa_portal/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + outbox backlog.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from hoa_portal.database import get_db
from hoa_portal.models.outbound_notification import OutboundNotification
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Number of queued / failed outbound notifications
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "outbox": {},
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"
        return result

    rows = (
        db.query(OutboundNotification.status, func.count(OutboundNotification.id))
        .filter(OutboundNotification.status.in_(["queued", "failed"]))
        .group_by(OutboundNotification.status)
        .all()
    )
    result["outbox"] = {"queued": 0, "failed": 0, **{s: n for s, n in rows}}
    if result["outbox"]["failed"]:
        result["status"] = "degraded"

    return result
