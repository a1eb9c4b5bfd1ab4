"""Rewarded-ad eligibility

Pure state evaluation shared by the read endpoint and the claim path.
"""

import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Optional

DEFAULT_AD_REWARD_AMOUNT = 10
DEFAULT_AD_COOLDOWN = timedelta(minutes=180)
DEFAULT_AD_DAILY_CAP = 8


class AdRewardStatus(str, Enum):
    ELIGIBLE = "eligible"
    COOLING = "cooling"
    DAILY_CAPPED = "daily_capped"


@dataclass(frozen=True)
class AdRewardState:
    status: AdRewardStatus
    seconds_remaining: int
    next_eligible_at: Optional[datetime]
    claims_today: int
    daily_cap: int

    @property
    def is_eligible(self) -> bool:
        return self.status == AdRewardStatus.ELIGIBLE


def next_utc_midnight(now: datetime) -> datetime:
    return datetime.combine(now.date() + timedelta(days=1), time.min)


def _ceil_seconds(delta: timedelta) -> int:
    return max(0, math.ceil(delta.total_seconds()))


def compute_ad_reward_state(
    last_claim_at: Optional[datetime],
    claims_today: int,
    now: datetime,
    interval: timedelta = DEFAULT_AD_COOLDOWN,
    daily_cap: int = DEFAULT_AD_DAILY_CAP,
) -> AdRewardState:
    """
    Evaluate whether a rewarded ad can be claimed at ``now``.

    The daily cap wins over the cooldown: a capped account waits for the
    later of the next UTC midnight and the end of its cooldown. Remaining
    seconds are rounded up so a countdown never reads 0 while cooling.
    """
    cooldown_ends = last_claim_at + interval if last_claim_at is not None else None

    if claims_today >= daily_cap:
        resume_at = next_utc_midnight(now)
        if cooldown_ends is not None and cooldown_ends > resume_at:
            resume_at = cooldown_ends
        return AdRewardState(
            status=AdRewardStatus.DAILY_CAPPED,
            seconds_remaining=_ceil_seconds(resume_at - now),
            next_eligible_at=resume_at,
            claims_today=claims_today,
            daily_cap=daily_cap,
        )

    if cooldown_ends is not None and cooldown_ends > now:
        return AdRewardState(
            status=AdRewardStatus.COOLING,
            seconds_remaining=_ceil_seconds(cooldown_ends - now),
            next_eligible_at=cooldown_ends,
            claims_today=claims_today,
            daily_cap=daily_cap,
        )

    return AdRewardState(
        status=AdRewardStatus.ELIGIBLE,
        seconds_remaining=0,
        next_eligible_at=None,
        claims_today=claims_today,
        daily_cap=daily_cap,
    )


def format_remaining(seconds: int) -> str:
    """Human-readable countdown, e.g. ``2h 05m`` or ``4m 09s``"""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m {secs:02d}s"
