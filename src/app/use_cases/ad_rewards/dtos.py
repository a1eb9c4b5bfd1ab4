"""Data Transfer Objects for Rewarded-Ad Use Cases"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.app.use_cases.wallet.dtos import TransactionResponseDTO
from src.domain.ad_reward_state import AdRewardState, AdRewardStatus, format_remaining


class AdRewardStateDTO(BaseModel):
    """
    Response DTO for rewarded-ad eligibility

    Derived from the stored last claim and today's counter; clients may
    count down locally but the claim endpoint re-validates.
    """

    account_id: str
    status: AdRewardStatus
    seconds_remaining: int = Field(..., description="Seconds until eligible (rounded up)")
    countdown: str = Field(..., description="Human-readable seconds_remaining")
    next_eligible_at: Optional[datetime] = None
    claims_today: int
    daily_cap: int
    reward_amount: int

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "status": "cooling",
                "seconds_remaining": 10740,
                "countdown": "2h 59m",
                "next_eligible_at": "2026-01-01T15:00:00",
                "claims_today": 1,
                "daily_cap": 8,
                "reward_amount": 10
            }
        }


class AdClaimResponseDTO(BaseModel):
    account_id: str
    credited: int
    balance: int
    transaction: TransactionResponseDTO
    state: AdRewardStateDTO


def to_state_dto(account_id: str, state: AdRewardState, reward_amount: int) -> AdRewardStateDTO:
    return AdRewardStateDTO(
        account_id=account_id,
        status=state.status,
        seconds_remaining=state.seconds_remaining,
        countdown=format_remaining(state.seconds_remaining),
        next_eligible_at=state.next_eligible_at,
        claims_today=state.claims_today,
        daily_cap=state.daily_cap,
        reward_amount=reward_amount,
    )
