"""Coupon Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.coupon import Coupon


class CouponRepository(ABC):
    """Repository interface for Coupon persistence"""

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Coupon]:
        """
        Retrieve coupon by its normalised (upper-case) code

        Returns:
            Coupon if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, coupon_id: int) -> Optional[Coupon]:
        pass

    @abstractmethod
    async def create(self, coupon: Coupon) -> Optional[Coupon]:
        """
        Create a new coupon

        Returns:
            Created Coupon, or None if the code is already taken
        """
        pass

    @abstractmethod
    async def increment_uses(self, coupon_id: int, now: datetime) -> bool:
        """
        Atomically count one redemption if the cap allows it

        Returns:
            True if counted, False when current_uses already reached max_uses
        """
        pass

    @abstractmethod
    async def set_active(self, coupon_id: int, is_active: bool, now: datetime) -> Optional[Coupon]:
        pass
