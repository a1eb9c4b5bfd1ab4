"""Rewarded-Ad API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.use_cases.ad_rewards import (
    GetAdRewardState,
    ClaimAdReward,
    AdRewardStateDTO,
    AdClaimResponseDTO,
)
from src.adapter.repositories.ad_cooldown_repository import SqlAlchemyAdCooldownRepository
from src.adapter.repositories.daily_limit_repository import SqlAlchemyDailyLimitRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    ad_reward_settings,
    build_wallet_ledger,
    get_change_notifier,
    get_clock,
    get_session,
)
from src.api.error import ClientError

router = APIRouter(prefix="/ad-rewards", tags=["Ad Rewards"])


@router.get(
    "/{account_id}",
    response_model=AdRewardStateDTO,
    status_code=status.HTTP_200_OK,
)
async def get_ad_reward_state(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Current rewarded-ad state: `eligible`, `cooling` or `daily_capped`,
    with the seconds remaining until the next claim.
    """
    use_case = GetAdRewardState(
        SqlAlchemyAdCooldownRepository(session),
        SqlAlchemyDailyLimitRepository(session),
        clock,
        settings=ad_reward_settings,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{account_id}/claim",
    response_model=AdClaimResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        429: {
            "description": "Cooling down or daily cap reached",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NOT_ELIGIBLE",
                            "message": "Rewarded ad not available: cooling",
                            "reason": "seconds_remaining=10740"
                        }
                    }
                }
            }
        }
    }
)
async def claim_ad_reward(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Claim the rewarded-ad credit after an ad view.

    Eligibility is re-checked server-side; a client countdown is never trusted.
    """
    use_case = ClaimAdReward(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        SqlAlchemyAdCooldownRepository(session),
        SqlAlchemyDailyLimitRepository(session),
        settings=ad_reward_settings,
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
