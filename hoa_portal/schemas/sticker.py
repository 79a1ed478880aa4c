# hoa_portal/schemas/sticker.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional


class StickerDecisionRequest(BaseModel):
    sticker_id: str
    action: str                          # approve | reject
    expiry_date: Optional[date] = None   # required for approve
    rejection_reason: Optional[str] = None


class StickerDecisionOut(BaseModel):
    sticker_id: str
    new_status: str
    expiry_date: Optional[date] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rfid_code: Optional[str] = None
    rejection_reason: Optional[str] = None
