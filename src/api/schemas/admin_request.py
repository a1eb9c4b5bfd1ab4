"""Request schemas for Admin API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.subscription import SubscriptionPlan


class AdjustBalanceRequestSchema(BaseModel):
    """
    Request schema for a manual balance adjustment

    Used for POST /admin/wallets/adjust endpoint.
    """

    account_id: str = Field(..., min_length=1)
    amount: int = Field(..., description="Signed ALC amount (> 0 credit, < 0 debit)")
    admin_id: str = Field(..., min_length=1)
    reason: Optional[str] = Field(default=None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {"account_id": "acc_123", "amount": -20, "admin_id": "admin_1", "reason": "Chargeback"}
        }


class ChangePlanRequestSchema(BaseModel):
    plan: SubscriptionPlan
    expires_at: Optional[datetime] = Field(default=None, description="Paid plan expiry (naive UTC)")
    admin_id: Optional[str] = Field(default=None, min_length=1, description="Administrator making the change")
