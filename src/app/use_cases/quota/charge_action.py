"""ChargeAction Use Case

Gates one content-generation action against the wallet and the daily quota.
"""

import logging
from datetime import date, datetime
from typing import Dict, Optional, Tuple
from libs.result import Result, Return
from src.app.errors import InsufficientBalanceError, LedgerError, QuotaExceededError, store_error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent, ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.app.use_cases.wallet.dtos import to_transaction_dto
from src.domain.alc_transaction import TransactionType
from src.domain.subscription import Subscription, can_act
from src.domain.wallet import Wallet
from .action_costs import ACTION_COST_TABLE, ActionType, cost_of
from .check_quota import ensure_subscription
from .dtos import ChargeActionCommandDTO, ChargeActionResponseDTO, to_quota_status_dto
from .quota_settings import QuotaSettings

logger = logging.getLogger(__name__)

FUNDED_BY_ALC = "alc"
FUNDED_BY_QUOTA = "quota"


def describe_action(action: ActionType, content: Optional[str]) -> str:
    if not content:
        return action.value
    return f"{action.value}: {content[:40]}..."


class ChargeAction:
    """
    Use Case: Charge one action

    Business Rules:
    1. Wallet holds at least the action cost: the cost is debited
    2. Otherwise the daily quota must allow the action (free of ALC)
    3. Otherwise QUOTA_EXCEEDED, nothing written
    4. Every allowed action counts one question
    5. Debit and question count commit together

    Flow:
    1. Ensure wallet and subscription exist, lock the subscription row
    2. Try the debit when the balance covers the cost
    3. Fall back to the quota when the debit is not possible
    4. Record the question, commit, publish changes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        subscription_repo: SubscriptionRepository,
        settings: Optional[QuotaSettings] = None,
        cost_table: Optional[Dict[str, int]] = None,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.subscription_repo = subscription_repo
        self.settings = settings or QuotaSettings()
        self.cost_table = cost_table or ACTION_COST_TABLE
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: ChargeActionCommandDTO) -> Result[ChargeActionResponseDTO]:
        account_id = command.account_id
        cost = cost_of(command.action, self.cost_table)
        clock = self.ledger.clock
        now = clock.now()
        today = clock.today()

        try:
            posting, wallet, subscription = await self._charge(command, cost, now, today)

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Action {command.action.value} rejected for account {account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Charging {command.action.value} failed for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to charge action"))

        funded_by = FUNDED_BY_ALC if posting else FUNDED_BY_QUOTA
        logger.info(
            f"Account {account_id} {command.action.value} action funded by {funded_by} "
            f"(cost {cost if posting else 0} ALC)"
        )

        events = posting.change_events() if posting else []
        events.append(
            ChangeEvent(
                account_id=account_id,
                entity=ChangeEntity.SUBSCRIPTION,
                action="update",
                payload=subscription.model_dump(mode="json"),
            )
        )
        await notify_changes(self.notifier, events)

        return Return.ok(
            ChargeActionResponseDTO(
                account_id=account_id,
                action=command.action,
                cost=cost if posting else 0,
                funded_by=funded_by,
                balance=posting.wallet.balance if posting else wallet.balance,
                transaction=to_transaction_dto(posting.transaction) if posting else None,
                quota=to_quota_status_dto(subscription, now, today, self.settings.plan_limits),
            )
        )

    @with_store_timeout
    async def _charge(
        self, command: ChargeActionCommandDTO, cost: int, now: datetime, today: date
    ) -> Tuple[Optional[LedgerPosting], Wallet, Subscription]:
        account_id = command.account_id
        wallet = await self.ledger.get_wallet(account_id)
        await ensure_subscription(self.subscription_repo, account_id, self.settings, today)
        subscription = await self.subscription_repo.get_by_account_id(account_id, for_update=True)

        posting = None
        if wallet.balance >= cost:
            try:
                posting = await self.ledger.post(
                    account_id=account_id,
                    amount=-cost,
                    transaction_type=TransactionType.USAGE,
                    description=describe_action(command.action, command.content),
                )
            except InsufficientBalanceError:
                # Balance spent concurrently since it was read
                posting = None

        if posting is None and not can_act(subscription, now, today, self.settings.plan_limits):
            raise QuotaExceededError(
                f"Daily question limit reached and balance too low for {command.action.value} "
                f"(cost {cost} ALC)",
                reason=f"balance={wallet.balance}, cost={cost}",
            )

        subscription = await self.subscription_repo.record_question(account_id, today, now)
        if subscription is None:
            raise LedgerError(f"Subscription vanished for account {account_id}")
        await self.uow.commit()
        return posting, wallet, subscription
