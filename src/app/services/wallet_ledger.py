"""Wallet Ledger

The only path that changes a wallet balance. Every posting is one
conditional balance update plus one transaction row, both inside the
caller's unit of work.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from src.app.errors import (
    DuplicateIdempotencyKeyError,
    IdempotencyConflictError,
    InsufficientBalanceError,
    InvalidAmountError,
)
from src.app.repositories.alc_transaction_repository import AlcTransactionRepository
from src.app.repositories.wallet_repository import WalletRepository
from src.app.services.change_notifier import ChangeEntity, ChangeEvent
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.alc_transaction import (
    AlcTransaction,
    PaymentMethod,
    TransactionStatus,
    TransactionType,
    amount_sign_matches,
)
from src.domain.wallet import Wallet

logger = logging.getLogger(__name__)

DEFAULT_WELCOME_BALANCE = 50


@dataclass
class LedgerPosting:
    transaction: AlcTransaction
    wallet: Wallet
    replayed: bool = False

    def change_events(self) -> List[ChangeEvent]:
        if self.replayed:
            return []
        return [
            ChangeEvent(
                account_id=self.wallet.account_id,
                entity=ChangeEntity.WALLET,
                action="update",
                payload=self.wallet.model_dump(mode="json"),
            ),
            ChangeEvent(
                account_id=self.transaction.account_id,
                entity=ChangeEntity.TRANSACTION,
                action="insert",
                payload=self.transaction.model_dump(mode="json"),
            ),
        ]


class WalletLedger:
    """
    Ledger Engine

    Business Rules:
    1. Wallets are created lazily with the welcome balance
    2. Amount sign must match the transaction type
    3. Balance never goes negative (checked by the store, not in memory)
    4. A repeated idempotency key returns the original transaction when
       account, amount and type match, IDEMPOTENCY_CONFLICT otherwise
    5. A keyed posting that loses the insert race is undone to its savepoint
       and answered from the winner's row
    """

    def __init__(
        self,
        wallet_repo: WalletRepository,
        transaction_repo: AlcTransactionRepository,
        clock: Clock,
        welcome_balance: int = DEFAULT_WELCOME_BALANCE,
        uow: Optional[UnitOfWork] = None,
    ):
        self.wallet_repo = wallet_repo
        self.transaction_repo = transaction_repo
        self.clock = clock
        self.welcome_balance = welcome_balance
        self.uow = uow

    async def get_wallet(self, account_id: str) -> Wallet:
        return await self.wallet_repo.get_or_create(account_id, self.welcome_balance)

    async def post(
        self,
        account_id: str,
        amount: int,
        transaction_type: TransactionType,
        description: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.AUTO_APPROVED,
        external_reference: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        proof_url: Optional[str] = None,
        admin_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> LedgerPosting:
        """
        Apply a signed amount to the account's wallet and record it

        Args:
            account_id: Account identifier
            amount: Signed ALC amount (credits > 0, debits < 0)
            transaction_type: Kind recorded on the transaction

        Returns:
            LedgerPosting with the transaction and the updated wallet

        Raises:
            InvalidAmountError: amount is zero or its sign contradicts the type
            InsufficientBalanceError: a debit exceeds the balance
            IdempotencyConflictError: the key belongs to a different posting
        """
        if not amount_sign_matches(transaction_type, amount):
            raise InvalidAmountError(
                f"Invalid amount {amount} for {transaction_type.value} transaction",
                reason="Credits must be positive, debits negative, and never zero",
            )

        fields = dict(
            description=description,
            status=status,
            external_reference=external_reference,
            payment_method=payment_method,
            proof_url=proof_url,
            admin_id=admin_id,
        )
        if not idempotency_key:
            return await self._apply(account_id, amount, transaction_type, None, fields)

        existing = await self.transaction_repo.get_by_idempotency_key(idempotency_key)
        if existing:
            return await self._replay(existing, account_id, amount, transaction_type)

        try:
            if self.uow is None:
                return await self._apply(account_id, amount, transaction_type, idempotency_key, fields)
            async with self.uow.savepoint():
                return await self._apply(account_id, amount, transaction_type, idempotency_key, fields)
        except DuplicateIdempotencyKeyError:
            existing = await self.transaction_repo.get_by_idempotency_key(idempotency_key)
            if existing is None:
                raise
            return await self._replay(existing, account_id, amount, transaction_type)

    async def _replay(
        self,
        existing: AlcTransaction,
        account_id: str,
        amount: int,
        transaction_type: TransactionType,
    ) -> LedgerPosting:
        key = existing.idempotency_key
        if (
            existing.account_id != account_id
            or existing.amount != amount
            or existing.transaction_type != transaction_type
        ):
            logger.warning(
                f"Idempotency key {key} reused by account {account_id} "
                f"({transaction_type.value} {amount}); recorded for account {existing.account_id} "
                f"({existing.transaction_type.value} {existing.amount})"
            )
            raise IdempotencyConflictError(
                f"Idempotency key {key} was already used for a different posting",
                reason=f"transaction_id={existing.id}",
            )

        logger.info(f"Idempotent replay of {key} for account {account_id}")
        wallet = await self.get_wallet(account_id)
        return LedgerPosting(transaction=existing, wallet=wallet, replayed=True)

    async def _apply(
        self,
        account_id: str,
        amount: int,
        transaction_type: TransactionType,
        idempotency_key: Optional[str],
        fields: Dict[str, Any],
    ) -> LedgerPosting:
        wallet = await self.get_wallet(account_id)
        now = self.clock.now()

        updated = await self.wallet_repo.apply_delta(account_id, amount, now)
        if updated is None:
            current = await self.wallet_repo.get_by_account_id(account_id)
            available = current.balance if current else wallet.balance
            raise InsufficientBalanceError(
                f"Insufficient balance. Required: {-amount}, Available: {available}",
                reason=f"balance={available}, required={-amount}",
            )

        transaction = AlcTransaction(
            account_id=account_id,
            wallet_id=updated.id,
            transaction_type=transaction_type,
            amount=amount,
            balance_after=updated.balance,
            idempotency_key=idempotency_key,
            created_at=now,
            **fields,
        )
        created = await self.transaction_repo.create(transaction)
        return LedgerPosting(transaction=created, wallet=updated)
