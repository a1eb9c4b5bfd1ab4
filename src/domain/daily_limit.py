"""Daily Limit Domain Entity"""

from datetime import datetime, date
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Date, Integer, UniqueConstraint
from src.domain.base import BaseModel, BigIntPK, utcnow


class DailyLimit(BaseModel, table=True):
    """
    Daily Limit - Per-account per-UTC-day counters

    Domain Rules:
    - One row per (account_id, day); a new day starts a fresh row
    - ads_watched never exceeds the daily ad cap
    """

    __tablename__ = "daily_limits"
    __table_args__ = (
        UniqueConstraint('account_id', 'date', name='uq_daily_limits_account_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True)
    )

    account_id: str = Field(index=True)

    day: date = Field(
        sa_column=Column("date", Date, nullable=False),
        description="UTC calendar day"
    )

    ads_watched: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Rewarded ads claimed on this day"
    )

    updated_at: datetime = Field(default_factory=utcnow)
