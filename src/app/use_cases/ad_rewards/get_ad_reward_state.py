"""GetAdRewardState Use Case

Reads the rewarded-ad state machine for an account.
"""

from datetime import date, datetime
from typing import Optional
from libs.result import Result, Return
from src.app.errors import store_error
from src.app.repositories.ad_cooldown_repository import AdCooldownRepository
from src.app.repositories.daily_limit_repository import DailyLimitRepository
from src.app.services.clock import Clock
from src.domain.ad_reward_state import AdRewardState, compute_ad_reward_state
from .ad_reward_settings import AdRewardSettings
from .dtos import AdRewardStateDTO, to_state_dto


async def load_ad_reward_state(
    cooldown_repo: AdCooldownRepository,
    daily_limit_repo: DailyLimitRepository,
    settings: AdRewardSettings,
    account_id: str,
    now: datetime,
    today: date,
) -> AdRewardState:
    cooldown = await cooldown_repo.get_by_account_id(account_id)
    daily = await daily_limit_repo.get(account_id, today)
    return compute_ad_reward_state(
        last_claim_at=cooldown.last_claim_at if cooldown else None,
        claims_today=daily.ads_watched if daily else 0,
        now=now,
        interval=settings.cooldown,
        daily_cap=settings.daily_cap,
    )


class GetAdRewardState:
    """
    Use Case: Rewarded-ad eligibility

    States: eligible, cooling (interval not elapsed), daily_capped.
    Read-only.
    """

    def __init__(
        self,
        cooldown_repo: AdCooldownRepository,
        daily_limit_repo: DailyLimitRepository,
        clock: Clock,
        settings: Optional[AdRewardSettings] = None,
    ):
        self.cooldown_repo = cooldown_repo
        self.daily_limit_repo = daily_limit_repo
        self.clock = clock
        self.settings = settings or AdRewardSettings()

    async def execute(self, account_id: str) -> Result[AdRewardStateDTO]:
        try:
            state = await load_ad_reward_state(
                self.cooldown_repo,
                self.daily_limit_repo,
                self.settings,
                account_id,
                self.clock.now(),
                self.clock.today(),
            )
            return Return.ok(to_state_dto(account_id, state, self.settings.reward_amount))
        except Exception as e:
            return Return.err(store_error(e, "Failed to read ad reward state"))
