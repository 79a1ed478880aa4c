# hoa_portal/models/vehicle_sticker.py
"""
Vehicle sticker table: resident vehicle registrations.
Created on resident request, moved through its lifecycle only by admin
decisions, never deleted (rejected/revoked/expired rows are kept as history).
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Text
from hoa_portal.database import Base

STICKER_STATUSES = ("requested", "pending", "active", "expiring", "expired", "rejected", "revoked")


class VehicleSticker(Base):
    __tablename__ = "vehicle_stickers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(36), nullable=False, index=True)
    household_id = Column(String(36), nullable=False, index=True)
    vehicle_plate = Column(String(20), nullable=False, index=True)
    vehicle_make = Column(String(50))
    vehicle_model = Column(String(50))
    vehicle_color = Column(String(30))
    status = Column(String(20), nullable=False, default="requested", index=True)
    expiry_date = Column(Date)                 # set iff status in active | expiring | expired
    rejection_reason = Column(Text)
    approved_by = Column(String(36))
    approved_at = Column(DateTime)
    rfid_code = Column(Text)                   # JSON payload encoded on the sticker
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VehicleSticker {self.id} plate={self.vehicle_plate} status={self.status}>"
