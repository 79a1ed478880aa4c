# hoa_portal/schemas/audit_log.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AuditLogOut(BaseModel):
    id: str
    actor_id: str
    tenant_id: Optional[str]
    action: str
    resource_type: str
    resource_id: str
    before_state: Optional[dict]
    after_state: Optional[dict]
    created_at: datetime

    class Config:
        from_attributes = True
