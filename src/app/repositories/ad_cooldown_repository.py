"""Ad Cooldown Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional
from src.domain.ad_cooldown import AdCooldown


class AdCooldownRepository(ABC):

    @abstractmethod
    async def get_by_account_id(self, account_id: str) -> Optional[AdCooldown]:
        pass

    @abstractmethod
    async def try_claim(self, account_id: str, now: datetime, interval: timedelta) -> Optional[AdCooldown]:
        """
        Atomically move last_claim_at to now if the interval has elapsed

        Creates the account's row when missing.

        Returns:
            Updated AdCooldown, or None while the account is cooling down
        """
        pass
