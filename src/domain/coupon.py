"""Coupon Domain Entity

Administrator-created promotional codes redeemable for ALC.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, Integer, String, CheckConstraint
from src.domain.base import BaseModel, BigIntPK, utcnow


def normalize_code(code: str) -> str:
    """Coupon codes are case-insensitive and stored upper-case"""
    return code.strip().upper()


class Coupon(BaseModel, table=True):
    """
    Coupon - Promotional code worth a fixed ALC amount

    Domain Rules:
    - code is unique and stored upper-case
    - alc_value is positive
    - current_uses never exceeds max_uses (None = unlimited)
    - Inactive or expired coupons cannot be redeemed
    """

    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint('alc_value > 0', name='coupon_alc_value_positive'),
        CheckConstraint(
            'max_uses IS NULL OR current_uses <= max_uses',
            name='coupon_uses_within_cap'
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
        description="Unique coupon identifier (auto-increment)"
    )

    code: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True),
        description="Upper-case redemption code"
    )

    alc_value: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="ALC credited per redemption"
    )

    is_active: bool = Field(
        default=True,
        description="Whether the coupon can be redeemed"
    )

    max_uses: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Global redemption cap (None = unlimited)"
    )

    current_uses: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Redemptions so far"
    )

    expires_at: Optional[datetime] = Field(
        default=None,
        description="Expiry timestamp (None = never expires)"
    )

    created_by: Optional[str] = Field(
        default=None,
        description="Administrator who created the coupon"
    )

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses
