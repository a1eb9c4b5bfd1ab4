"""ChangePlan Use Case

Switches an account's subscription plan.
"""

import logging
from typing import Optional, Tuple
from libs.result import Result, Return
from src.app.errors import LedgerError, store_error
from src.app.repositories.admin_log_repository import AdminLogRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent, ChangeNotifier, notify_changes
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin.audit import record_admin_action
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.admin_log import AdminAction
from src.domain.subscription import Subscription, SubscriptionPlan
from .check_quota import ensure_subscription
from .dtos import ChangePlanCommandDTO, QuotaStatusDTO, to_quota_status_dto
from .quota_settings import QuotaSettings

logger = logging.getLogger(__name__)


class ChangePlan:
    """
    Use Case: Change subscription plan

    Business Rules:
    1. questions_limit follows the new plan's table entry
    2. Today's consumed count is kept; only later checks see the new limit
    3. An admin log entry commits with the change
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        clock: Clock,
        settings: Optional[QuotaSettings] = None,
        notifier: Optional[ChangeNotifier] = None,
        admin_log_repo: Optional[AdminLogRepository] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.clock = clock
        self.settings = settings or QuotaSettings()
        self.notifier = notifier
        self.admin_log_repo = admin_log_repo
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: ChangePlanCommandDTO) -> Result[QuotaStatusDTO]:
        now = self.clock.now()
        today = self.clock.today()
        try:
            previous_plan, subscription = await self._change(command)

        except LedgerError as e:
            await self.uow.rollback()
            logger.error(f"Plan change failed for account {command.account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Plan change failed for account {command.account_id}: {e}")
            return Return.err(store_error(e, "Failed to change plan"))

        if command.plan.rank > previous_plan.rank:
            direction = "upgraded"
        elif command.plan.rank < previous_plan.rank:
            direction = "downgraded"
        else:
            direction = "renewed"
        logger.info(
            f"Account {command.account_id} {direction} from {previous_plan.value} to {command.plan.value}"
        )
        await notify_changes(self.notifier, [
            ChangeEvent(
                account_id=command.account_id,
                entity=ChangeEntity.SUBSCRIPTION,
                action="update",
                payload=subscription.model_dump(mode="json"),
            )
        ])
        return Return.ok(to_quota_status_dto(subscription, now, today, self.settings.plan_limits))

    @with_store_timeout
    async def _change(self, command: ChangePlanCommandDTO) -> Tuple[SubscriptionPlan, Subscription]:
        now = self.clock.now()
        current = await ensure_subscription(
            self.subscription_repo, command.account_id, self.settings, self.clock.today()
        )
        previous_plan = current.plan

        subscription = await self.subscription_repo.update_plan(
            command.account_id,
            plan=command.plan,
            questions_limit=self.settings.stored_limit(command.plan),
            expires_at=command.expires_at,
            now=now,
        )
        if subscription is None:
            raise LedgerError(f"Subscription vanished for account {command.account_id}")

        await record_admin_action(
            self.admin_log_repo,
            command.admin_id,
            AdminAction.CHANGE_PLAN,
            now=now,
            target_account_id=command.account_id,
            details={
                "from_plan": previous_plan.value,
                "to_plan": command.plan.value,
                "expires_at": command.expires_at.isoformat() if command.expires_at else None,
            },
        )
        await self.uow.commit()
        return previous_plan, subscription
