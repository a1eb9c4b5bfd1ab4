"""RecordQuestion Use Case

Counts one question against today's quota.
"""

import logging
from datetime import date, datetime
from typing import Optional
from libs.result import Result, Return
from src.app.errors import LedgerError, store_error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent, ChangeNotifier, notify_changes
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.subscription import Subscription
from .check_quota import ensure_subscription
from .dtos import QuotaStatusDTO, to_quota_status_dto
from .quota_settings import QuotaSettings

logger = logging.getLogger(__name__)


class RecordQuestion:
    """
    Use Case: recordAction

    The increment and the day rollover happen in one store update: a counter
    from an earlier day restarts at 1 and is stamped with today.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        clock: Clock,
        settings: Optional[QuotaSettings] = None,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.clock = clock
        self.settings = settings or QuotaSettings()
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, account_id: str) -> Result[QuotaStatusDTO]:
        now = self.clock.now()
        today = self.clock.today()
        try:
            subscription = await self._record(account_id, now, today)

        except LedgerError as e:
            await self.uow.rollback()
            logger.error(f"Failed to record question for account {account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record question for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to record question"))

        logger.info(
            f"Recorded question {subscription.questions_today} on {today} for account {account_id}"
        )
        await notify_changes(self.notifier, [
            ChangeEvent(
                account_id=account_id,
                entity=ChangeEntity.SUBSCRIPTION,
                action="update",
                payload=subscription.model_dump(mode="json"),
            )
        ])
        return Return.ok(to_quota_status_dto(subscription, now, today, self.settings.plan_limits))

    @with_store_timeout
    async def _record(self, account_id: str, now: datetime, today: date) -> Subscription:
        await ensure_subscription(self.subscription_repo, account_id, self.settings, today)

        subscription = await self.subscription_repo.record_question(account_id, today, now)
        if subscription is None:
            raise LedgerError(f"Subscription vanished for account {account_id}")
        await self.uow.commit()
        return subscription
