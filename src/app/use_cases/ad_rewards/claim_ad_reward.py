"""ClaimAdReward Use Case

Grants the rewarded-ad credit after re-validating eligibility in the store.
"""

import logging
from datetime import date, datetime
from typing import Optional, Tuple
from libs.result import Result, Return
from src.app.errors import LedgerError, NotEligibleError, store_error
from src.app.repositories.ad_cooldown_repository import AdCooldownRepository
from src.app.repositories.daily_limit_repository import DailyLimitRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent, ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.app.use_cases.wallet.dtos import to_transaction_dto
from src.domain.ad_cooldown import AdCooldown
from src.domain.ad_reward_state import compute_ad_reward_state
from src.domain.alc_transaction import TransactionType
from src.domain.daily_limit import DailyLimit
from .ad_reward_settings import AdRewardSettings
from .dtos import AdClaimResponseDTO, to_state_dto
from .get_ad_reward_state import load_ad_reward_state

logger = logging.getLogger(__name__)


class ClaimAdReward:
    """
    Use Case: Claim a rewarded-ad credit

    Business Rules:
    1. Client-side countdowns are never trusted; eligibility is decided by
       two conditional store updates (cooldown row, daily row)
    2. Cooldown move, daily increment and the reward credit commit together
    3. If either update matches no row the claim is NOT_ELIGIBLE and nothing
       is committed; of two racing claims exactly one succeeds
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        cooldown_repo: AdCooldownRepository,
        daily_limit_repo: DailyLimitRepository,
        settings: Optional[AdRewardSettings] = None,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.cooldown_repo = cooldown_repo
        self.daily_limit_repo = daily_limit_repo
        self.settings = settings or AdRewardSettings()
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, account_id: str) -> Result[AdClaimResponseDTO]:
        settings = self.settings
        now = self.ledger.clock.now()
        today = self.ledger.clock.today()

        try:
            posting, cooldown, daily = await self._claim(account_id, now, today)

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Ad reward claim rejected for account {account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Ad reward claim failed for account {account_id}: {e}")
            return Return.err(store_error(e, "Failed to claim ad reward"))

        logger.info(
            f"Ad reward {daily.ads_watched}/{settings.daily_cap} granted to account {account_id}"
        )

        events = posting.change_events()
        events.append(ChangeEvent(
            account_id=account_id,
            entity=ChangeEntity.AD_COOLDOWN,
            action="update",
            payload=cooldown.model_dump(mode="json"),
        ))
        events.append(ChangeEvent(
            account_id=account_id,
            entity=ChangeEntity.DAILY_LIMIT,
            action="update",
            payload=daily.model_dump(mode="json"),
        ))
        await notify_changes(self.notifier, events)

        state = compute_ad_reward_state(
            last_claim_at=cooldown.last_claim_at,
            claims_today=daily.ads_watched,
            now=now,
            interval=settings.cooldown,
            daily_cap=settings.daily_cap,
        )
        return Return.ok(
            AdClaimResponseDTO(
                account_id=account_id,
                credited=settings.reward_amount,
                balance=posting.wallet.balance,
                transaction=to_transaction_dto(posting.transaction),
                state=to_state_dto(account_id, state, settings.reward_amount),
            )
        )

    @with_store_timeout
    async def _claim(
        self, account_id: str, now: datetime, today: date
    ) -> Tuple[LedgerPosting, AdCooldown, DailyLimit]:
        settings = self.settings
        cooldown = await self.cooldown_repo.try_claim(account_id, now, settings.cooldown)
        daily = None
        if cooldown is not None:
            daily = await self.daily_limit_repo.increment_ads_watched(
                account_id, today, settings.daily_cap, now
            )

        if cooldown is None or daily is None:
            await self.uow.rollback()
            state = await load_ad_reward_state(
                self.cooldown_repo, self.daily_limit_repo, settings, account_id, now, today
            )
            raise NotEligibleError(
                f"Rewarded ad not available: {state.status.value}",
                reason=f"seconds_remaining={state.seconds_remaining}",
            )

        posting = await self.ledger.post(
            account_id=account_id,
            amount=settings.reward_amount,
            transaction_type=TransactionType.REWARD,
            description=settings.description,
        )
        await self.uow.commit()
        return posting, cooldown, daily
