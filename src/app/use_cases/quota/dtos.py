"""Data Transfer Objects for Quota Use Cases"""

from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.wallet.dtos import TransactionResponseDTO
from src.domain.subscription import (
    Subscription,
    SubscriptionPlan,
    can_act,
    question_limit_for,
)
from .action_costs import ActionType


class QuotaStatusDTO(BaseModel):
    """
    Response DTO for the daily question quota

    questions_today is already rolled over: it is 0 when the stored counter
    belongs to an earlier day.
    """

    account_id: str
    plan: SubscriptionPlan = Field(..., description="Stored plan")
    effective_plan: SubscriptionPlan = Field(..., description="Plan in force (expired paid plans count as free)")
    questions_today: int
    questions_limit: Optional[int] = Field(..., description="Daily limit (None = unlimited)")
    remaining: Optional[int] = Field(..., description="Questions left today (None = unlimited)")
    unlimited: bool
    can_act: bool
    day: date
    expires_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "plan": "free",
                "effective_plan": "free",
                "questions_today": 3,
                "questions_limit": 25,
                "remaining": 22,
                "unlimited": False,
                "can_act": True,
                "day": "2026-01-01",
                "expires_at": None
            }
        }


class ChangePlanCommandDTO(BaseModel):
    account_id: str
    plan: SubscriptionPlan
    expires_at: Optional[datetime] = Field(default=None, description="Paid plan expiry (None = no expiry)")
    admin_id: Optional[str] = Field(default=None, description="Administrator making the change")


class EstimateCommandDTO(BaseModel):
    actions: List[ActionType] = Field(..., min_length=1, description="Actions to price")

    class Config:
        json_schema_extra = {"example": {"actions": ["chat", "chat", "image"]}}


class EstimateResponseDTO(BaseModel):
    estimated_cost: int = Field(..., description="Total ALC cost")
    breakdown: Dict[str, int] = Field(..., description="ALC cost per action type")


class ChargeActionCommandDTO(BaseModel):
    account_id: str
    action: ActionType
    content: Optional[str] = Field(default=None, description="Prompt text, used for the transaction description")


class ChargeActionResponseDTO(BaseModel):
    """
    Outcome of gating one content-generation action

    funded_by is "alc" when the cost was debited, "quota" when the action
    was covered by the daily question allowance.
    """

    account_id: str
    action: ActionType
    cost: int
    funded_by: str
    balance: int
    transaction: Optional[TransactionResponseDTO] = None
    quota: QuotaStatusDTO


def to_quota_status_dto(
    subscription: Subscription,
    now: datetime,
    today: date,
    plan_limits: Dict[str, Optional[int]],
) -> QuotaStatusDTO:
    limit = question_limit_for(subscription, now, plan_limits)
    used = subscription.questions_used_on(today)
    return QuotaStatusDTO(
        account_id=subscription.account_id,
        plan=subscription.plan,
        effective_plan=subscription.effective_plan(now),
        questions_today=used,
        questions_limit=limit,
        remaining=None if limit is None else max(0, limit - used),
        unlimited=limit is None,
        can_act=can_act(subscription, now, today, plan_limits),
        day=today,
        expires_at=subscription.expires_at,
    )
