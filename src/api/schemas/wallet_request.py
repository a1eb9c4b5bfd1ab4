"""Request schemas for Wallet API

Pydantic models for validating incoming HTTP requests. Amount signs are
validated by the use cases so they surface as INVALID_AMOUNT.
"""

from typing import Optional
from pydantic import BaseModel, Field
from src.domain.alc_transaction import PaymentMethod, TransactionType


class CreditRequestSchema(BaseModel):
    """
    Request schema for crediting ALC

    Used for POST /wallets/credit endpoint.
    """

    account_id: str = Field(..., min_length=1, description="Account identifier")

    amount: int = Field(..., description="ALC amount to credit (must be > 0)")

    transaction_type: TransactionType = Field(
        default=TransactionType.PURCHASE,
        description="Credit kind (purchase, reward, coupon, admin_credit, transfer)"
    )

    description: Optional[str] = Field(default=None, max_length=500)

    external_reference: Optional[str] = Field(default=None, max_length=255)

    payment_method: Optional[PaymentMethod] = Field(default=None)

    proof_url: Optional[str] = Field(default=None, max_length=1024)

    idempotency_key: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Retry-safe key; a repeated key returns the original transaction"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "amount": 500,
                "transaction_type": "purchase",
                "payment_method": "moncash",
                "external_reference": "MC-77812",
                "idempotency_key": "purchase:MC-77812"
            }
        }


class DebitRequestSchema(BaseModel):
    """
    Request schema for spending ALC

    Used for POST /wallets/debit endpoint.
    """

    account_id: str = Field(..., min_length=1, description="Account identifier")
    amount: int = Field(..., description="ALC amount to debit (must be > 0)")
    description: Optional[str] = Field(default=None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {"account_id": "acc_123", "amount": 45, "description": "code: refactor my parser..."}
        }
