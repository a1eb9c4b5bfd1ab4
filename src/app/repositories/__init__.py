from .wallet_repository import WalletRepository
from .alc_transaction_repository import AlcTransactionRepository
from .subscription_repository import SubscriptionRepository
from .coupon_repository import CouponRepository
from .coupon_use_repository import CouponUseRepository
from .daily_limit_repository import DailyLimitRepository
from .ad_cooldown_repository import AdCooldownRepository
from .admin_log_repository import AdminLogRepository

__all__ = [
    "WalletRepository",
    "AlcTransactionRepository",
    "SubscriptionRepository",
    "CouponRepository",
    "CouponUseRepository",
    "DailyLimitRepository",
    "AdCooldownRepository",
    "AdminLogRepository",
]
