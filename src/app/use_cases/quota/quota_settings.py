from dataclasses import dataclass, field
from typing import Dict, Optional
from src.domain.subscription import DEFAULT_PLAN_QUESTION_LIMITS, SubscriptionPlan


@dataclass
class QuotaSettings:
    """Plan table and default plan used by the quota use cases"""

    plan_limits: Dict[str, Optional[int]] = field(
        default_factory=lambda: dict(DEFAULT_PLAN_QUESTION_LIMITS)
    )
    default_plan: SubscriptionPlan = SubscriptionPlan.FREE

    def stored_limit(self, plan: SubscriptionPlan) -> int:
        """Value kept in subscriptions.questions_limit (0 for unlimited plans)"""
        return self.plan_limits.get(plan.value) or 0

    @classmethod
    def from_config(cls, config) -> "QuotaSettings":
        return cls(
            plan_limits=dict(config.PLAN_QUESTION_LIMITS),
            default_plan=SubscriptionPlan(config.DEFAULT_PLAN),
        )
