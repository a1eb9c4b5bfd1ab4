"""Subscription Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional
from src.domain.subscription import Subscription, SubscriptionPlan


class SubscriptionRepository(ABC):
    """Repository interface for Subscription persistence"""

    @abstractmethod
    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by account ID

        Args:
            account_id: Account identifier
            for_update: If True, lock the row with SELECT FOR UPDATE
        """
        pass

    @abstractmethod
    async def get_or_create(
        self,
        account_id: str,
        plan: SubscriptionPlan,
        questions_limit: int,
        today: date,
    ) -> Subscription:
        """
        Return the account's subscription, creating it if missing

        Args:
            account_id: Account identifier
            plan: Plan for a newly created subscription
            questions_limit: Daily limit for a newly created subscription
            today: Current UTC day (initial last_question_reset)
        """
        pass

    @abstractmethod
    async def record_question(self, account_id: str, today: date, now: datetime) -> Optional[Subscription]:
        """
        Count one question for today in a single store update

        The counter restarts at 1 when last_question_reset is not today.

        Returns:
            Updated Subscription, or None if the account has none
        """
        pass

    @abstractmethod
    async def update_plan(
        self,
        account_id: str,
        plan: SubscriptionPlan,
        questions_limit: int,
        expires_at: Optional[datetime],
        now: datetime,
    ) -> Optional[Subscription]:
        """
        Switch plan and limit; today's consumed count is left untouched

        Returns:
            Updated Subscription, or None if the account has none
        """
        pass
