from .redeem_coupon import RedeemCoupon
from .create_coupon import CreateCoupon
from .set_coupon_active import SetCouponActive
from .repair_coupon_redemptions import RepairCouponRedemptions
from .coupon_credit import coupon_idempotency_key
from .dtos import (
    RedeemCouponCommandDTO,
    RedeemCouponResponseDTO,
    CreateCouponCommandDTO,
    SetCouponActiveCommandDTO,
    CouponResponseDTO,
    RepairResultDTO,
)

__all__ = [
    "RedeemCoupon",
    "CreateCoupon",
    "SetCouponActive",
    "RepairCouponRedemptions",
    "coupon_idempotency_key",
    "RedeemCouponCommandDTO",
    "RedeemCouponResponseDTO",
    "CreateCouponCommandDTO",
    "SetCouponActiveCommandDTO",
    "CouponResponseDTO",
    "RepairResultDTO",
]
