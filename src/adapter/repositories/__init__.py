from .wallet_repository import SqlAlchemyWalletRepository
from .alc_transaction_repository import SqlAlchemyAlcTransactionRepository
from .subscription_repository import SqlAlchemySubscriptionRepository
from .coupon_repository import SqlAlchemyCouponRepository
from .coupon_use_repository import SqlAlchemyCouponUseRepository
from .daily_limit_repository import SqlAlchemyDailyLimitRepository
from .ad_cooldown_repository import SqlAlchemyAdCooldownRepository
from .admin_log_repository import SqlAlchemyAdminLogRepository

__all__ = [
    "SqlAlchemyWalletRepository",
    "SqlAlchemyAlcTransactionRepository",
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyCouponRepository",
    "SqlAlchemyCouponUseRepository",
    "SqlAlchemyDailyLimitRepository",
    "SqlAlchemyAdCooldownRepository",
    "SqlAlchemyAdminLogRepository",
]
