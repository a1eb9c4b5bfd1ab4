"""Coupon Use Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.coupon_use import CouponUse


class CouponUseRepository(ABC):
    """
    Repository interface for CouponUse persistence

    The unique (coupon_id, account_id) constraint is the single point that
    decides whether an account already redeemed a coupon.
    """

    @abstractmethod
    async def get(self, coupon_id: int, account_id: str) -> Optional[CouponUse]:
        pass

    @abstractmethod
    async def create(self, coupon_use: CouponUse) -> Optional[CouponUse]:
        """
        Record a redemption

        Returns:
            Created CouponUse, or None if the account already redeemed the coupon
        """
        pass

    @abstractmethod
    async def mark_credited(self, coupon_use_id: int, transaction_id: int, now: datetime) -> None:
        """Stamp the redemption with the credit transaction"""
        pass

    @abstractmethod
    async def list_uncredited(self, limit: int = 100) -> List[CouponUse]:
        """Redemptions recorded without a credit, oldest first"""
        pass
