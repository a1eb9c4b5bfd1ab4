"""Ad Cooldown Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from src.domain.base import BaseModel, BigIntPK, utcnow


class AdCooldown(BaseModel, table=True):
    """
    Ad Cooldown - Last rewarded-ad claim of an account

    Kept in the store so the interval survives restarts and is shared by
    every process serving the account.
    """

    __tablename__ = "ad_cooldowns"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True)
    )

    account_id: str = Field(index=True, unique=True)

    last_claim_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last successful claim"
    )

    updated_at: datetime = Field(default_factory=utcnow)
