# hoa_portal/models/construction_permit.py
"""
Construction permit table: household renovation/build requests.
road_fee_paid is a side flag independent of status: a permit stays
"approved" after its road fee is paid.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Text, Boolean, Numeric
from hoa_portal.database import Base

PERMIT_STATUSES = ("pending", "submitted", "approved", "rejected", "in_progress", "paid", "completed")


class ConstructionPermit(Base):
    __tablename__ = "construction_permits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(36), nullable=False, index=True)
    household_id = Column(String(36), nullable=False, index=True)
    project_description = Column(Text)
    status = Column(String(20), nullable=False, default="pending", index=True)
    road_fee_amount = Column(Numeric(12, 2))   # set on approve
    road_fee_paid = Column(Boolean, nullable=False, default=False)
    road_fee_paid_at = Column(DateTime)
    payment_reference = Column(String(100))
    payment_method = Column(String(50))
    approved_by = Column(String(36))
    approved_at = Column(DateTime)
    rejection_reason = Column(Text)
    project_start_date = Column(Date)
    project_end_date = Column(Date)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<ConstructionPermit {self.id} status={self.status} paid={self.road_fee_paid}>"
