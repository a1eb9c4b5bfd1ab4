"""CheckQuota Use Case

Reports whether the account may take another action today.
"""

import logging
from datetime import date
from typing import Optional
from libs.result import Result, Return
from src.app.errors import LedgerError, store_error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.subscription import Subscription
from .dtos import QuotaStatusDTO, to_quota_status_dto
from .quota_settings import QuotaSettings

logger = logging.getLogger(__name__)


async def ensure_subscription(
    subscription_repo: SubscriptionRepository,
    account_id: str,
    settings: QuotaSettings,
    today: date,
) -> Subscription:
    """Load the account's subscription, creating it on the default plan"""
    return await subscription_repo.get_or_create(
        account_id,
        plan=settings.default_plan,
        questions_limit=settings.stored_limit(settings.default_plan),
        today=today,
    )


class CheckQuota:
    """
    Use Case: Evaluate canAct for an account

    Business Rules:
    1. Unlimited plans can always act
    2. Otherwise questions used today < daily limit
    3. A counter stamped with an earlier day counts as 0 (no write needed)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        clock: Clock,
        settings: Optional[QuotaSettings] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.clock = clock
        self.settings = settings or QuotaSettings()
        self.timeout_seconds = timeout_seconds

    async def execute(self, account_id: str) -> Result[QuotaStatusDTO]:
        now = self.clock.now()
        today = self.clock.today()
        try:
            subscription = await self._load(account_id, today)
            return Return.ok(
                to_quota_status_dto(subscription, now, today, self.settings.plan_limits)
            )
        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Quota check failed for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to check quota"))

    @with_store_timeout
    async def _load(self, account_id: str, today: date) -> Subscription:
        subscription = await ensure_subscription(
            self.subscription_repo, account_id, self.settings, today
        )
        await self.uow.commit()
        return subscription
