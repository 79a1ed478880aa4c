# hoa_portal/models/outbound_notification.py
"""
Outbox for out-of-band messages (welcome emails, password resets).
Rows are written in the same transaction as the change that needs them and
delivered later by notification_service.dispatch_pending().
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text, JSON
from hoa_portal.database import Base


class OutboundNotification(Base):
    __tablename__ = "outbound_notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    channel = Column(String(20), nullable=False, default="email")
    recipient = Column(String(320), nullable=False)
    template = Column(String(50), nullable=False)     # admin_welcome | admin_password_reset
    payload = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default="queued", index=True)  # queued | sent | failed
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    sent_at = Column(DateTime)

    def __repr__(self):
        return f"<OutboundNotification {self.id} {self.template} -> {self.recipient} status={self.status}>"
