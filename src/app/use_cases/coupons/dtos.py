"""Data Transfer Objects for Coupon Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.wallet.dtos import TransactionResponseDTO
from src.domain.coupon import Coupon


class RedeemCouponCommandDTO(BaseModel):
    account_id: str = Field(..., description="Redeeming account")
    code: str = Field(..., description="Coupon code (case-insensitive)")

    class Config:
        json_schema_extra = {"example": {"account_id": "acc_123", "code": "welcome2026"}}


class RedeemCouponResponseDTO(BaseModel):
    account_id: str
    code: str
    credited: int = Field(..., description="ALC credited by the coupon")
    balance: int
    transaction: TransactionResponseDTO


class CreateCouponCommandDTO(BaseModel):
    """
    Command DTO for creating a coupon

    Used as input to CreateCoupon use case (administrators only).
    """

    code: str = Field(..., description="Redemption code, stored upper-case")
    alc_value: int = Field(..., description="ALC credited per redemption (> 0)")
    max_uses: Optional[int] = Field(default=None, description="Global cap (None = unlimited)")
    expires_at: Optional[datetime] = Field(default=None, description="Expiry (None = never)")
    created_by: Optional[str] = Field(default=None, description="Administrator id")
    is_active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "code": "WELCOME2026",
                "alc_value": 100,
                "max_uses": 500,
                "expires_at": "2026-12-31T23:59:59",
                "created_by": "admin_1",
                "is_active": True
            }
        }


class SetCouponActiveCommandDTO(BaseModel):
    coupon_id: int
    is_active: bool
    admin_id: Optional[str] = None


class CouponResponseDTO(BaseModel):
    coupon_id: int
    code: str
    alc_value: int
    is_active: bool
    max_uses: Optional[int] = None
    current_uses: int
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime


class RepairResultDTO(BaseModel):
    """Outcome of one coupon repair run"""

    redemptions_checked: int
    redemptions_repaired: int
    redemptions_failed: int
    repaired_coupon_use_ids: List[int] = Field(default_factory=list)


def to_coupon_dto(coupon: Coupon) -> CouponResponseDTO:
    return CouponResponseDTO(
        coupon_id=coupon.id,
        code=coupon.code,
        alc_value=coupon.alc_value,
        is_active=coupon.is_active,
        max_uses=coupon.max_uses,
        current_uses=coupon.current_uses,
        expires_at=coupon.expires_at,
        created_by=coupon.created_by,
        created_at=coupon.created_at,
    )
