# hoa_portal/schemas/permit.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


class PermitDecisionRequest(BaseModel):
    permit_id: str
    action: str          # approve | reject | mark_in_progress | mark_paid | mark_completed
    road_fee_amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)  # Numeric(12, 2)
    rejection_reason: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_method: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PermitDecisionOut(BaseModel):
    permit_id: str
    new_status: str
    road_fee_amount: Optional[float] = None
    road_fee_paid: bool
    road_fee_paid_at: Optional[datetime] = None
    payment_reference: Optional[str] = None
    payment_method: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    project_start_date: Optional[date] = None
    project_end_date: Optional[date] = None
