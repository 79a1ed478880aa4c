# hoa_portal/schemas/admin_user.py
from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import Optional


class AdminCreateRequest(BaseModel):
    # Older dashboard builds send community_id instead of tenant_id
    tenant_id: str = Field(validation_alias=AliasChoices("tenant_id", "community_id"))
    email: EmailStr
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: str                 # admin_head | admin_officer
    phone: Optional[str] = None


class AdminCreatedOut(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    tenant_id: str
    tenant_name: str
    credentials_delivery: str = "email_queued"


class PasswordResetRequest(BaseModel):
    user_id: str
    email: EmailStr


class PasswordResetOut(BaseModel):
    user_id: str
    email: str
    credentials_delivery: str = "email_queued"
