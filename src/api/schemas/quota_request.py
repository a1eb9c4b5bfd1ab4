"""Request schemas for Quota API"""

from typing import List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.quota.action_costs import ActionType


class EstimateRequestSchema(BaseModel):
    actions: List[ActionType] = Field(..., min_length=1, description="Actions to price")


class ChargeRequestSchema(BaseModel):
    """
    Request schema for charging a content-generation action

    Used for POST /quota/charge endpoint.
    """

    account_id: str = Field(..., min_length=1)
    action: ActionType = Field(..., description="chat, image, code or video")
    content: Optional[str] = Field(default=None, description="Prompt text, first 40 chars recorded")

    class Config:
        json_schema_extra = {
            "example": {"account_id": "acc_123", "action": "image", "content": "a lighthouse at dusk"}
        }
