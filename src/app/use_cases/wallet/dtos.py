"""Data Transfer Objects for Wallet Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.alc_transaction import AlcTransaction, PaymentMethod, TransactionStatus, TransactionType
from src.domain.wallet import Wallet


class CreditCommandDTO(BaseModel):
    """
    Command DTO for crediting a wallet

    Used as input to CreditWallet use case.
    """

    account_id: str = Field(..., description="Account identifier")

    amount: int = Field(..., description="ALC amount to credit (must be > 0)")

    transaction_type: TransactionType = Field(
        default=TransactionType.PURCHASE,
        description="Credit kind (purchase, reward, coupon, admin_credit, transfer)"
    )

    description: Optional[str] = Field(default=None)

    external_reference: Optional[str] = Field(
        default=None,
        description="Payment reference from the payment channel"
    )

    payment_method: Optional[PaymentMethod] = Field(default=None)

    proof_url: Optional[str] = Field(default=None)

    idempotency_key: Optional[str] = Field(
        default=None,
        description="Retry-safe key; a repeated key returns the original transaction"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "amount": 500,
                "transaction_type": "purchase",
                "description": "ALC pack 500",
                "external_reference": "MC-77812",
                "payment_method": "moncash",
                "idempotency_key": "purchase:MC-77812"
            }
        }


class DebitCommandDTO(BaseModel):
    """Command DTO for spending ALC"""

    account_id: str = Field(..., description="Account identifier")
    amount: int = Field(..., description="ALC amount to debit (must be > 0)")
    description: Optional[str] = Field(default=None)


class AdjustBalanceCommandDTO(BaseModel):
    """
    Command DTO for a manual administrator adjustment

    Positive amounts become admin_credit, negative ones admin_debit.
    """

    account_id: str = Field(..., description="Account identifier")
    amount: int = Field(..., description="Signed ALC amount (non-zero)")
    admin_id: str = Field(..., description="Administrator performing the adjustment")
    reason: Optional[str] = Field(default=None, description="Recorded as the transaction description")


class ListTransactionsQueryDTO(BaseModel):
    account_id: str = Field(..., description="Account identifier")
    limit: int = Field(default=50, ge=1, le=200)
    offset: int = Field(default=0, ge=0)


class WalletResponseDTO(BaseModel):
    """
    Response DTO for wallet reads

    Returned by GetWallet use case.
    """

    account_id: str
    balance: int = Field(..., description="Current ALC balance")
    total_earned: int
    total_spent: int
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "balance": 50,
                "total_earned": 0,
                "total_spent": 0,
                "created_at": "2026-01-01T00:00:00",
                "updated_at": "2026-01-01T00:00:00"
            }
        }


class TransactionResponseDTO(BaseModel):
    """
    Response DTO for ALC transactions

    Returned by CreditWallet, DebitWallet, AdjustBalance, ListTransactions.
    """

    transaction_id: int
    account_id: str
    transaction_type: str
    amount: int = Field(..., description="Signed ALC amount")
    balance_after: int
    description: Optional[str] = None
    status: str
    external_reference: Optional[str] = None
    payment_method: Optional[str] = None
    proof_url: Optional[str] = None
    admin_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    created_at: datetime


class TransactionListResponseDTO(BaseModel):
    account_id: str
    transactions: List[TransactionResponseDTO]
    total: int = Field(..., description="Total number of transactions of the account")
    limit: int
    offset: int


class WalletDiscrepancyDTO(BaseModel):
    """Wallet whose balance disagrees with its transaction history"""

    account_id: str
    wallet_id: int
    balance: int
    expected_balance: int = Field(..., description="initial_balance + sum of transaction amounts")
    difference: int


class ReconciliationResultDTO(BaseModel):
    total_wallets_checked: int
    discrepancies_found: int
    discrepancies: List[WalletDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


def to_wallet_dto(wallet: Wallet) -> WalletResponseDTO:
    return WalletResponseDTO(
        account_id=wallet.account_id,
        balance=wallet.balance,
        total_earned=wallet.total_earned,
        total_spent=wallet.total_spent,
        created_at=wallet.created_at,
        updated_at=wallet.updated_at,
    )


def to_transaction_dto(transaction: AlcTransaction) -> TransactionResponseDTO:
    return TransactionResponseDTO(
        transaction_id=transaction.id,
        account_id=transaction.account_id,
        transaction_type=TransactionType(transaction.transaction_type).value,
        amount=transaction.amount,
        balance_after=transaction.balance_after,
        description=transaction.description,
        status=TransactionStatus(transaction.status).value,
        external_reference=transaction.external_reference,
        payment_method=PaymentMethod(transaction.payment_method).value if transaction.payment_method else None,
        proof_url=transaction.proof_url,
        admin_id=transaction.admin_id,
        idempotency_key=transaction.idempotency_key,
        created_at=transaction.created_at,
    )
