# hoa_portal/models/audit_log.py
"""
Audit log table: append-only record of every privileged mutation.
Rows are never updated or deleted by this service.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from hoa_portal.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_id = Column(String(36), nullable=False, index=True)
    tenant_id = Column(String(36), index=True)      # null for platform-level actions
    action = Column(String(50), nullable=False, index=True)
    resource_type = Column(String(50), nullable=False, index=True)
    resource_id = Column(String(36), nullable=False, index=True)
    before_state = Column(JSON)
    after_state = Column(JSON)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.resource_type}:{self.resource_id} by={self.actor_id}>"
