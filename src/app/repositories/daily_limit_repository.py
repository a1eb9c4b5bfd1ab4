"""Daily Limit Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional
from src.domain.daily_limit import DailyLimit


class DailyLimitRepository(ABC):

    @abstractmethod
    async def get(self, account_id: str, day: date) -> Optional[DailyLimit]:
        pass

    @abstractmethod
    async def increment_ads_watched(
        self,
        account_id: str,
        day: date,
        daily_cap: int,
        now: datetime,
    ) -> Optional[DailyLimit]:
        """
        Atomically count one rewarded ad for the day if below daily_cap

        Creates the day's row when missing.

        Returns:
            Updated DailyLimit, or None when the cap is already reached
        """
        pass
