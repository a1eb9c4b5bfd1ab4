"""DebitWallet Use Case

Spends ALC from an account's wallet.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import InvalidAmountError, LedgerError, store_error
from src.app.services.change_notifier import ChangeNotifier, notify_changes
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.wallet_ledger import LedgerPosting, WalletLedger
from src.app.use_cases.store_timeout import DEFAULT_STORE_TIMEOUT_SECONDS, with_store_timeout
from src.domain.alc_transaction import TransactionType
from .dtos import DebitCommandDTO, TransactionResponseDTO, to_transaction_dto

logger = logging.getLogger(__name__)


class DebitWallet:
    """
    Use Case: Debit ALC from a wallet

    Business Rules:
    1. Amount must be > 0
    2. balance >= amount, checked atomically by the store
    3. On INSUFFICIENT_BALANCE nothing is written and no transaction exists
    4. Recorded as a usage transaction with a negative amount
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: WalletLedger,
        notifier: Optional[ChangeNotifier] = None,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.ledger = ledger
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: DebitCommandDTO) -> Result[TransactionResponseDTO]:
        try:
            posting = await self._post(command)

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Debit rejected for account {command.account_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Debit failed for account {command.account_id}: {e}")
            return Return.err(store_error(e, "Failed to debit wallet"))

        logger.info(
            f"Debited {command.amount} ALC from account {command.account_id}, "
            f"balance={posting.wallet.balance}"
        )
        await notify_changes(self.notifier, posting.change_events())
        return Return.ok(to_transaction_dto(posting.transaction))

    @with_store_timeout
    async def _post(self, command: DebitCommandDTO) -> LedgerPosting:
        if command.amount <= 0:
            raise InvalidAmountError(
                f"Debit amount must be greater than 0, got {command.amount}"
            )

        posting = await self.ledger.post(
            account_id=command.account_id,
            amount=-command.amount,
            transaction_type=TransactionType.USAGE,
            description=command.description,
        )
        await self.uow.commit()
        return posting
