# hoa_portal/models/identity_account.py
"""
Identity store: one row per login-capable account (superadmins, admins).
Role and tenant live in app_metadata and are only written by this service;
user_metadata holds profile fields the user may edit.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, JSON
from hoa_portal.database import Base


class IdentityAccount(Base):
    __tablename__ = "identity_accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), unique=True, nullable=False, index=True)  # stored lower-case
    password_hash = Column(String(128), nullable=False)
    app_metadata = Column(JSON, nullable=False, default=dict)    # {role, tenant_id}
    user_metadata = Column(JSON, nullable=False, default=dict)   # {first_name, last_name, phone}
    is_active = Column(Boolean, nullable=False, default=True)
    must_change_password = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def role(self):
        return (self.app_metadata or {}).get("role")

    @property
    def tenant_id(self):
        return (self.app_metadata or {}).get("tenant_id")

    def __repr__(self):
        return f"<IdentityAccount {self.id} email={self.email} role={self.role}>"
