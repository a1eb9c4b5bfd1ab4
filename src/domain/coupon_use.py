"""Coupon Use Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey, UniqueConstraint
from src.domain.base import BaseModel, BigIntPK, utcnow


class CouponUse(BaseModel, table=True):
    """
    Coupon Use - One redemption of a coupon by one account

    Domain Rules:
    - At most one row per (coupon_id, account_id)
    - transaction_id / credited_at stay empty until the credit lands;
      such rows are picked up by the repair job
    """

    __tablename__ = "coupon_uses"
    __table_args__ = (
        UniqueConstraint('coupon_id', 'account_id', name='uq_coupon_uses_coupon_account'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True)
    )

    coupon_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Coupon"
    )

    account_id: str = Field(
        index=True,
        description="Redeeming account"
    )

    transaction_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("alc_transactions.id"), nullable=True),
        description="Credit transaction (None until credited)"
    )

    created_at: datetime = Field(default_factory=utcnow)

    credited_at: Optional[datetime] = Field(
        default=None,
        description="When the ALC credit was applied"
    )

    @property
    def is_credited(self) -> bool:
        return self.transaction_id is not None
