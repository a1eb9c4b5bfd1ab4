from .base import BaseModel, utcnow
from .wallet import Wallet
from .alc_transaction import AlcTransaction, TransactionType, TransactionStatus, PaymentMethod
from .subscription import Subscription, SubscriptionPlan
from .coupon import Coupon, normalize_code
from .coupon_use import CouponUse
from .daily_limit import DailyLimit
from .ad_cooldown import AdCooldown
from .ad_reward_state import AdRewardState, AdRewardStatus, compute_ad_reward_state
from .admin_log import AdminAction, AdminLog

__all__ = [
    "BaseModel",
    "utcnow",
    "Wallet",
    "AlcTransaction",
    "TransactionType",
    "TransactionStatus",
    "PaymentMethod",
    "Subscription",
    "SubscriptionPlan",
    "Coupon",
    "normalize_code",
    "CouponUse",
    "DailyLimit",
    "AdCooldown",
    "AdRewardState",
    "AdRewardStatus",
    "compute_ad_reward_state",
    "AdminAction",
    "AdminLog",
]
