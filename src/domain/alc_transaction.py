"""ALC Transaction Domain Entity

Immutable append-only audit trail of every wallet balance mutation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String, Text
from src.domain.base import BaseModel, BigIntPK, utcnow


class TransactionType(str, Enum):
    """ALC transaction kinds"""
    PURCHASE = "purchase"          # ALC bought with real money
    REWARD = "reward"              # Rewarded ad view
    TRANSFER = "transfer"          # Account to account (either sign)
    ADMIN_CREDIT = "admin_credit"  # Manual admin credit
    ADMIN_DEBIT = "admin_debit"    # Manual admin debit
    COUPON = "coupon"              # Coupon redemption
    USAGE = "usage"                # Spent on an AI action


class TransactionStatus(str, Enum):
    """ALC transaction status"""
    PENDING = "pending"
    AUTO_APPROVED = "auto_approved"
    APPROVED = "approved"
    REJECTED = "rejected"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    """Payment channels accepted for purchases"""
    NATCASH = "natcash"
    MONCASH = "moncash"
    PAYPAL = "paypal"
    CARD = "card"
    BINANCE = "binance"


CREDIT_TYPES = frozenset({
    TransactionType.PURCHASE,
    TransactionType.REWARD,
    TransactionType.COUPON,
    TransactionType.ADMIN_CREDIT,
})

DEBIT_TYPES = frozenset({
    TransactionType.USAGE,
    TransactionType.ADMIN_DEBIT,
})


def amount_sign_matches(transaction_type: TransactionType, amount: int) -> bool:
    """Credits carry positive amounts, debits negative; transfers either"""
    if amount == 0:
        return False
    if transaction_type in CREDIT_TYPES:
        return amount > 0
    if transaction_type in DEBIT_TYPES:
        return amount < 0
    return True


class AlcTransaction(BaseModel, table=True):
    """
    ALC Transaction - Immutable audit trail of wallet mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is signed: credits > 0, debits < 0
    - balance_after equals the wallet balance right after this mutation
    - idempotency_key, when set, is unique (prevents double crediting)
    """

    __tablename__ = "alc_transactions"
    __table_args__ = (
        Index('ix_alc_transactions_account_created', 'account_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        description="Account ID for query optimization"
    )

    wallet_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Wallet"
    )

    transaction_type: TransactionType = Field(
        description="Kind of mutation (purchase, reward, coupon, usage, ...)"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Signed ALC amount"
    )

    balance_after: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Wallet balance after this mutation"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-text description shown in the history"
    )

    status: TransactionStatus = Field(
        default=TransactionStatus.AUTO_APPROVED,
        description="Approval status"
    )

    external_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External payment/transfer reference"
    )

    payment_method: Optional[PaymentMethod] = Field(
        default=None,
        description="Payment channel for purchases"
    )

    proof_url: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1024), nullable=True),
        description="Link to a payment proof"
    )

    admin_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Administrator who issued an admin credit/debit"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        description="Deduplication key (e.g. coupon:<coupon_id>:<account_id>)"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Transaction timestamp (immutable)"
    )
