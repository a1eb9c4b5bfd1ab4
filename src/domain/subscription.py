"""Subscription Domain Entity

Tracks the account's plan and its per-day question counter.
"""

from datetime import datetime, date
from enum import Enum
from typing import Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import Date, Integer, CheckConstraint
from src.domain.base import BaseModel, BigIntPK, utcnow


class SubscriptionPlan(str, Enum):
    """Subscription plans, ordered by generosity"""
    FREE = "free"
    PLUS = "plus"
    PREMIUM = "premium"
    VIP = "vip"

    @property
    def rank(self) -> int:
        return list(SubscriptionPlan).index(self)


DEFAULT_PLAN_QUESTION_LIMITS: Dict[str, Optional[int]] = {
    SubscriptionPlan.FREE.value: 25,
    SubscriptionPlan.PLUS.value: 100,
    SubscriptionPlan.PREMIUM.value: None,
    SubscriptionPlan.VIP.value: None,
}


class Subscription(BaseModel, table=True):
    """
    Subscription - Account plan and daily question quota

    Domain Rules:
    - One subscription per account (created lazily on the free plan)
    - questions_today counts actions taken on last_question_reset
    - A stale last_question_reset means zero questions used today
    - Unlimited plans bypass the counter entirely
    - An expired paid plan is evaluated as free
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint('questions_today >= 0', name='subscription_questions_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
        description="Unique subscription identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        unique=True,
        description="Account ID (unique - one subscription per account)"
    )

    plan: SubscriptionPlan = Field(
        default=SubscriptionPlan.FREE,
        description="Current plan (free, plus, premium, vip)"
    )

    questions_today: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Questions recorded on last_question_reset"
    )

    questions_limit: int = Field(
        default=25,
        sa_column=Column(Integer, nullable=False, default=25),
        description="Daily question limit for limited plans"
    )

    last_question_reset: date = Field(
        sa_column=Column(Date, nullable=False),
        description="UTC day the counter belongs to"
    )

    expires_at: Optional[datetime] = Field(
        default=None,
        description="Paid plan expiry (None = no expiry)"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    def effective_plan(self, now: datetime) -> SubscriptionPlan:
        if self.plan != SubscriptionPlan.FREE and self.expires_at is not None and self.expires_at <= now:
            return SubscriptionPlan.FREE
        return self.plan

    def questions_used_on(self, today: date) -> int:
        return self.questions_today if self.last_question_reset == today else 0


def question_limit_for(
    subscription: Subscription,
    now: datetime,
    plan_limits: Dict[str, Optional[int]],
) -> Optional[int]:
    """Daily limit in force for the subscription, None when unlimited"""
    plan = subscription.effective_plan(now)
    if plan.value not in plan_limits:
        return subscription.questions_limit
    limit = plan_limits[plan.value]
    if limit is None:
        return None
    if plan != subscription.plan:
        # Expired plan falls back to the free table entry
        return limit
    return subscription.questions_limit


def can_act(
    subscription: Subscription,
    now: datetime,
    today: date,
    plan_limits: Dict[str, Optional[int]],
) -> bool:
    limit = question_limit_for(subscription, now, plan_limits)
    if limit is None:
        return True
    return subscription.questions_used_on(today) < limit
