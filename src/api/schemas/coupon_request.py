"""Request schemas for Coupon API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RedeemRequestSchema(BaseModel):
    """
    Request schema for redeeming a coupon

    Used for POST /coupons/redeem endpoint. The code is case-insensitive.
    """

    account_id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=64)

    class Config:
        json_schema_extra = {"example": {"account_id": "acc_123", "code": "welcome2026"}}


class CreateCouponRequestSchema(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    alc_value: int = Field(..., description="ALC credited per redemption (> 0)")
    max_uses: Optional[int] = Field(default=None, description="Global cap (None = unlimited)")
    expires_at: Optional[datetime] = Field(default=None, description="Naive UTC expiry")
    created_by: Optional[str] = None
    is_active: bool = True


class UpdateCouponRequestSchema(BaseModel):
    is_active: bool
    admin_id: Optional[str] = Field(default=None, min_length=1, description="Administrator making the change")
