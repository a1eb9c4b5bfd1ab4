from dataclasses import dataclass
from datetime import timedelta
from src.domain.ad_reward_state import (
    DEFAULT_AD_COOLDOWN,
    DEFAULT_AD_DAILY_CAP,
    DEFAULT_AD_REWARD_AMOUNT,
)


@dataclass
class AdRewardSettings:
    reward_amount: int = DEFAULT_AD_REWARD_AMOUNT
    cooldown: timedelta = DEFAULT_AD_COOLDOWN
    daily_cap: int = DEFAULT_AD_DAILY_CAP

    @property
    def description(self) -> str:
        return f"Rewarded ad view (+{self.reward_amount} ALC)"

    @classmethod
    def from_config(cls, config) -> "AdRewardSettings":
        return cls(
            reward_amount=config.AD_REWARD_AMOUNT,
            cooldown=timedelta(minutes=config.AD_COOLDOWN_MINUTES),
            daily_cap=config.AD_DAILY_CAP,
        )
