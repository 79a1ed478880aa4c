# hoa_portal/models/admin_user.py
"""
Tenant-scoped admin records. The id is shared with the identity account.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from hoa_portal.database import Base

ADMIN_ROLES = ("admin_head", "admin_officer")


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), ForeignKey("identity_accounts.id"), primary_key=True)
    tenant_id = Column(String(36), ForeignKey("communities.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False)                  # admin_head | admin_officer
    status = Column(String(20), nullable=False, default="active")
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(40))
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<AdminUser {self.id} tenant={self.tenant_id} role={self.role}>"
