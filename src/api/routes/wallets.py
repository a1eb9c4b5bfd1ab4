"""Wallet API Routes

FastAPI routes for ALC balance and transaction history.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.wallet_request import CreditRequestSchema, DebitRequestSchema
from src.app.services.change_notifier import ChangeNotifier
from src.app.services.clock import Clock
from src.app.use_cases.wallet import (
    CreditWallet,
    DebitWallet,
    GetWallet,
    ListTransactions,
    CreditCommandDTO,
    DebitCommandDTO,
    ListTransactionsQueryDTO,
    WalletResponseDTO,
    TransactionResponseDTO,
    TransactionListResponseDTO,
)
from src.adapter.repositories.alc_transaction_repository import SqlAlchemyAlcTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import build_wallet_ledger, get_change_notifier, get_clock, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/wallets", tags=["Wallets"])


@router.get(
    "/{account_id}",
    response_model=WalletResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_wallet(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Get the account's wallet.

    The wallet is created with the welcome balance on first access.
    """
    use_case = GetWallet(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{account_id}/transactions",
    response_model=TransactionListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    account_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """
    List the account's transactions, newest first.

    **Query parameters:**
    - `limit`: page size (1-200, default 50)
    - `offset`: number of transactions to skip
    """
    use_case = ListTransactions(SqlAlchemyAlcTransactionRepository(session))
    result = await use_case.execute(
        ListTransactionsQueryDTO(account_id=account_id, limit=limit, offset=offset)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/credit",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Invalid amount",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_AMOUNT",
                            "message": "Credit amount must be greater than 0, got 0"
                        }
                    }
                }
            }
        }
    }
)
async def credit_wallet(
    request: CreditRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Credit ALC to a wallet.

    Repeating a request with the same `idempotency_key` returns the original
    transaction without crediting twice.

    **Returns:**
    - 200: Credit applied
    - 400: Amount not positive, or its sign contradicts the transaction type
    - 503: Store unavailable
    """
    command = CreditCommandDTO(
        account_id=request.account_id,
        amount=request.amount,
        transaction_type=request.transaction_type,
        description=request.description,
        external_reference=request.external_reference,
        payment_method=request.payment_method,
        proof_url=request.proof_url,
        idempotency_key=request.idempotency_key,
    )

    use_case = CreditWallet(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/debit",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Insufficient balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "Insufficient balance. Required: 45, Available: 30"
                        }
                    }
                }
            }
        }
    }
)
async def debit_wallet(
    request: DebitRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Spend ALC from a wallet.

    **Returns:**
    - 200: Debit applied
    - 402: Balance lower than the amount (nothing recorded)
    """
    use_case = DebitWallet(
        SqlAlchemyUnitOfWork(session),
        build_wallet_ledger(session, clock),
        notifier=notifier,
        timeout_seconds=ApplicationConfig.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        DebitCommandDTO(
            account_id=request.account_id,
            amount=request.amount,
            description=request.description,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
