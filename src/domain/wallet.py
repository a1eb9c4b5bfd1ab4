"""Wallet Domain Entity

Spendable ALC balance of one account. Each account has exactly one wallet,
created lazily with a welcome balance on first access.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger
from src.domain.base import BaseModel, BigIntPK, utcnow


class Wallet(BaseModel, table=True):
    """
    Wallet - Tracks an account's ALC balance

    Domain Rules:
    - One wallet per account (account_id is unique)
    - Balance must be non-negative
    - Balance only changes through AlcTransactions
    - balance == initial_balance + sum(transaction amounts)
    - total_earned / total_spent are lifetime counters
    """

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint('balance >= 0', name='wallet_balance_non_negative'),
        CheckConstraint('total_earned >= 0', name='wallet_total_earned_non_negative'),
        CheckConstraint('total_spent >= 0', name='wallet_total_spent_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
        description="Unique wallet identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        unique=True,
        description="Account ID (unique - one wallet per account)"
    )

    balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Current ALC balance (must be >= 0)"
    )

    initial_balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Welcome balance granted when the wallet was created"
    )

    total_earned: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Lifetime ALC credited"
    )

    total_spent: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Lifetime ALC debited"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Wallet creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last balance update timestamp"
    )
